"""Sample listings for local development."""

SAMPLE_PROPERTIES = [
    {
        "id": "11111111-0000-0000-0000-000000000001",
        "title": "Family villa with pool in Canggu",
        "property_type": "villa",
        "listing_type": "sale",
        "price": 4_500_000_000,
        "city": "Badung",
        "state": "Bali",
        "bedrooms": 4,
        "bathrooms": 3,
        "area_sqm": 320,
        "property_features": {"pool": True, "garden": True, "security": True},
    },
    {
        "id": "11111111-0000-0000-0000-000000000002",
        "title": "Modern villa near Seminyak beach",
        "property_type": "villa",
        "listing_type": "sale",
        "price": 4_900_000_000,
        "city": "Badung",
        "state": "Bali",
        "bedrooms": 4,
        "bathrooms": 3,
        "area_sqm": 300,
        "property_features": {"pool": True, "garden": True, "furnished": True},
    },
    {
        "id": "11111111-0000-0000-0000-000000000003",
        "title": "Rice-field view villa in Ubud",
        "property_type": "villa",
        "listing_type": "sale",
        "price": 3_200_000_000,
        "city": "Gianyar",
        "state": "Bali",
        "bedrooms": 3,
        "bathrooms": 2,
        "area_sqm": 250,
        "property_features": {"pool": True, "garden": True},
    },
    {
        "id": "11111111-0000-0000-0000-000000000004",
        "title": "Townhouse in Badung",
        "property_type": "house",
        "listing_type": "sale",
        "price": 2_100_000_000,
        "city": "Badung",
        "state": "Bali",
        "bedrooms": 3,
        "bathrooms": 2,
        "area_sqm": 180,
        "property_features": {"garage": True, "security": True},
    },
    {
        "id": "11111111-0000-0000-0000-000000000005",
        "title": "Studio apartment in South Jakarta",
        "property_type": "apartment",
        "listing_type": "rent",
        "price": 8_000_000,
        "city": "Jakarta Selatan",
        "state": "DKI Jakarta",
        "bedrooms": 1,
        "bathrooms": 1,
        "area_sqm": 35,
        "property_features": {"elevator": True, "wifi": True, "gym": True},
    },
    {
        "id": "11111111-0000-0000-0000-000000000006",
        "title": "Two-bedroom apartment in Kuningan",
        "property_type": "apartment",
        "listing_type": "rent",
        "price": 12_500_000,
        "city": "Jakarta Selatan",
        "state": "DKI Jakarta",
        "bedrooms": 2,
        "bathrooms": 1,
        "area_sqm": 55,
        "property_features": {"elevator": True, "pool": True, "gym": True},
    },
]
