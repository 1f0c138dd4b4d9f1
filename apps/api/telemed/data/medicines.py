"""Starter medicine catalog seeded into development databases."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CatalogMedicine:
    """One coded entry in the prescription builder's catalog."""

    code: str
    name: str
    generic_name: str
    strength: str
    form: str
    category: str
    manufacturer: str = ""


MEDICINES: list[CatalogMedicine] = [
    CatalogMedicine("AC", "Paracetamol 500mg", "Acetaminophen", "500mg", "tablet", "Analgesic", "Micro Labs"),
    CatalogMedicine("IBU", "Ibuprofen 400mg", "Ibuprofen", "400mg", "tablet", "NSAID", "Abbott"),
    CatalogMedicine("AMX", "Amoxicillin 500mg", "Amoxicillin", "500mg", "capsule", "Antibiotic", "Cipla"),
    CatalogMedicine("AZI", "Azithromycin 250mg", "Azithromycin", "250mg", "tablet", "Antibiotic", "Alembic"),
    CatalogMedicine("MET", "Metformin 500mg", "Metformin Hydrochloride", "500mg", "tablet", "Antidiabetic", "USV"),
    CatalogMedicine("AML", "Amlodipine 5mg", "Amlodipine Besylate", "5mg", "tablet", "Antihypertensive", "Pfizer"),
    CatalogMedicine("OME", "Omeprazole 20mg", "Omeprazole", "20mg", "capsule", "Proton pump inhibitor", "Dr. Reddy's"),
    CatalogMedicine("CET", "Cetirizine 10mg", "Cetirizine Hydrochloride", "10mg", "tablet", "Antihistamine", "UCB"),
    CatalogMedicine("VD3", "Vitamin D3 60000IU", "Cholecalciferol", "60000IU", "capsule", "Supplement", "Mankind"),
    CatalogMedicine("IFA", "Iron + Folic Acid", "Ferrous Sulphate + Folic Acid", "100mg/0.5mg", "tablet", "Supplement"),
    CatalogMedicine("ASP", "Aspirin 75mg", "Acetylsalicylic Acid", "75mg", "tablet", "Antiplatelet", "Bayer"),
    CatalogMedicine("ATO", "Atorvastatin 10mg", "Atorvastatin Calcium", "10mg", "tablet", "Statin", "Ranbaxy"),
    CatalogMedicine("LEV", "Levothyroxine 50mcg", "Levothyroxine Sodium", "50mcg", "tablet", "Thyroid", "Abbott"),
    CatalogMedicine("SAL", "Salbutamol Inhaler", "Salbutamol", "100mcg/dose", "inhaler", "Bronchodilator", "Cipla"),
    CatalogMedicine("PAN", "Pantoprazole 40mg", "Pantoprazole Sodium", "40mg", "tablet", "Proton pump inhibitor", "Alkem"),
    CatalogMedicine("DOM", "Domperidone 10mg", "Domperidone", "10mg", "tablet", "Antiemetic", "Torrent"),
    CatalogMedicine("DIC", "Diclofenac 50mg", "Diclofenac Sodium", "50mg", "tablet", "NSAID", "Novartis"),
    CatalogMedicine("CSY", "Cough Syrup", "Dextromethorphan + Chlorpheniramine", "100ml", "syrup", "Antitussive"),
    CatalogMedicine("MVT", "Multivitamin", "Multivitamin", "", "tablet", "Supplement"),
    CatalogMedicine("CAD", "Calcium + Vitamin D", "Calcium Carbonate + Cholecalciferol", "500mg/250IU", "tablet", "Supplement"),
]
