"""Starter catalog. Loaded by init_db when the medicines table is empty."""

MEDICINES = [
    {
        "name": "Paracetamol 500mg",
        "generic_name": "Paracetamol",
        "brand": "Crocin",
        "category": "Pain Relief",
        "price": 30.00,
        "stock": 150,
        "requires_prescription": False,
        "description": "Relief from fever, headache and body pain.",
        "dosage": "1 tablet every 6 hours",
        "manufacturer": "GSK",
    },
    {
        "name": "Dolo 650",
        "generic_name": "Paracetamol",
        "brand": "Dolo",
        "category": "Pain Relief",
        "price": 32.00,
        "stock": 120,
        "requires_prescription": False,
        "description": "High fever and severe headache.",
        "dosage": "1 tablet every 6-8 hours",
        "manufacturer": "Micro Labs",
    },
    {
        "name": "Amoxicillin 500mg",
        "generic_name": "Amoxicillin",
        "brand": "Mox",
        "category": "Antibiotics",
        "price": 95.00,
        "stock": 40,
        "requires_prescription": True,
        "description": "Broad-spectrum antibiotic for bacterial infections.",
        "dosage": "1 capsule three times a day",
        "manufacturer": "Sun Pharma",
    },
    {
        "name": "Azithromycin 500mg",
        "generic_name": "Azithromycin",
        "brand": "Azithral",
        "category": "Antibiotics",
        "price": 120.00,
        "stock": 8,
        "requires_prescription": True,
        "description": "Antibiotic for respiratory and skin infections.",
        "dosage": "1 tablet daily for 3 days",
        "manufacturer": "Alembic",
    },
    {
        "name": "Cetirizine 10mg",
        "generic_name": "Cetirizine",
        "brand": "Okacet",
        "category": "Allergy",
        "price": 18.00,
        "stock": 200,
        "requires_prescription": False,
        "description": "Relief from sneezing, runny nose and itching.",
        "dosage": "1 tablet at bedtime",
        "manufacturer": "Cipla",
    },
    {
        "name": "Metformin 500mg",
        "generic_name": "Metformin",
        "brand": "Glycomet",
        "category": "Diabetes",
        "price": 45.00,
        "stock": 90,
        "requires_prescription": True,
        "description": "Blood sugar control for type 2 diabetes.",
        "dosage": "1 tablet twice a day with meals",
        "manufacturer": "USV",
    },
    {
        "name": "Pantoprazole 40mg",
        "generic_name": "Pantoprazole",
        "brand": "Pan 40",
        "category": "Digestive Health",
        "price": 110.00,
        "stock": 60,
        "requires_prescription": False,
        "description": "Acidity and heartburn relief.",
        "dosage": "1 tablet before breakfast",
        "manufacturer": "Alkem",
    },
    {
        "name": "Vitamin D3 60K",
        "generic_name": "Cholecalciferol",
        "brand": "Uprise-D3",
        "category": "Vitamins",
        "price": 35.00,
        "stock": 5,
        "requires_prescription": False,
        "description": "Weekly vitamin D supplement.",
        "dosage": "1 capsule per week",
        "manufacturer": "Alkem",
    },
    {
        "name": "Amlodipine 5mg",
        "generic_name": "Amlodipine",
        "brand": "Amlong",
        "category": "Cardiac Care",
        "price": 55.00,
        "stock": 0,
        "requires_prescription": True,
        "description": "Blood pressure control.",
        "dosage": "1 tablet daily",
        "manufacturer": "Micro Labs",
    },
    {
        "name": "Benadryl Cough Syrup",
        "generic_name": "Diphenhydramine",
        "brand": "Benadryl",
        "category": "Cough & Cold",
        "price": 95.00,
        "stock": 35,
        "requires_prescription": False,
        "description": "Relief from dry and allergic cough.",
        "dosage": "10 ml three times a day",
        "manufacturer": "Johnson & Johnson",
    },
]
