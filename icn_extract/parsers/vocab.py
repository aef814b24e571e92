# ===============================
# File: icn_extract/parsers/vocab.py
# ===============================
"""Static lookup tables shared by the census and order-listing parsers."""
import re
from types import MappingProxyType
from typing import Tuple

MONTHS = MappingProxyType(
    {
        "jan": 1, "january": 1,
        "feb": 2, "february": 2,
        "mar": 3, "march": 3,
        "apr": 4, "april": 4,
        "may": 5,
        "jun": 6, "june": 6,
        "jul": 7, "july": 7,
        "aug": 8, "august": 8,
        "sep": 9, "sept": 9, "september": 9,
        "oct": 10, "october": 10,
        "nov": 11, "november": 11,
        "dec": 12, "december": 12,
    }
)

# Only Unit 2, Unit 3 and Unit 4 exist in the facility
VALID_UNITS = frozenset({"2", "3", "4"})

# Administrative rows in census exports that look like residents
NON_RESIDENT_NAMES = frozenset(
    {
        "MEDICAREONLY",
        "CONTINUED",
        "DISCHARGED",
        "HOSPITAL",
        "BEDCERTIFICATION",
        "CERTIFICATION",
        "ALL",
        "UNIT",
        "MEDICARE",
    }
)

MEDICATION_FORMS: Tuple[str, ...] = (
    "tablet", "tab", "capsule", "cap", "solution", "susp", "suspension",
    "injection", "inj", "cream", "oint", "ointment", "powder", "liquid",
    "drops", "spray", "syrup", "elixir", "gel", "lotion", "patch",
    "suppository", "aerosol", "inhaler", "nebulizer",
)

# Generic and brand names; the primary precision source for medication names
ANTIBIOTIC_NAMES: Tuple[str, ...] = (
    "amoxicillin", "augmentin", "amox", "azithromycin", "zithromax", "z-?pack",
    "ciprofloxacin", "cipro", "levofloxacin", "levaquin", "metronidazole",
    "flagyl", "doxycycline", "doxy", "cephalexin", "keflex",
    "sulfamethoxazole", "bactrim", "septra", "clindamycin", "cleocin",
    "nitrofurantoin", "macrobid", "macrodantin", "penicillin", "pen-?vk",
    "ampicillin", "amoxil", "vancomycin", "vancocin", "ceftriaxone",
    "rocephin", "hydroxychloroquine", "plaquenil", "moxifloxacin", "avelox",
    "cefdinir", "omnicef", "cefuroxime", "ceftin", "zinacef", "trimethoprim",
    "fluconazole", "diflucan", "nystatin", "mycostatin", "gentamicin",
    "garamycin", "tobramycin", "tobrex", "erythromycin", "ery-?tab",
    "clarithromycin", "biaxin", "cefazolin", "ancef", "kefzol", "ceftazidime",
    "fortaz", "tazicef", "cefepime", "maxipime", "piperacillin", "zosyn",
    "tazobactam", "meropenem", "merrem", "imipenem", "primaxin", "ertapenem",
    "invanz", "linezolid", "zyvox", "daptomycin", "cubicin", "tigecycline",
    "tygacil", "colistin", "polymyxin", "rifampin", "rifadin", "rifabutin",
    "isoniazid", "inh", "pyrazinamide", "ethambutol", "myambutol",
    "minocycline", "minocin", "tetracycline", "sumycin", "mupirocin",
    "bactroban", "neomycin", "bacitracin", "neosporin", "silver sulfadiazine",
    "silvadene", "acyclovir", "valacyclovir", "valtrex", "famciclovir",
    "famvir", "oseltamivir", "tamiflu", "caspofungin", "cancidas",
    "micafungin", "mycamine", "anidulafungin", "eraxis", "amphotericin",
    "ambisome", "voriconazole", "vfend", "posaconazole", "noxafil",
    "itraconazole", "sporanox", "terbinafine", "lamisil", "ketoconazole",
    "nizoral", "methenamine", "hiprex", "urex", "fosfomycin", "monurol",
    "cefpodoxime", "vantin", "cefixime", "suprax", "cefaclor", "ceclor",
    "cefotaxime", "claforan", "cefoxitin", "mefoxin", "ceftaroline", "teflaro",
    "aztreonam", "azactam", "nafcillin", "oxacillin", "dicloxacillin",
    "amikacin", "amikin", "streptomycin", "kanamycin", "norfloxacin",
    "noroxin", "ofloxacin", "floxin", "gatifloxacin", "gemifloxacin",
    "factive", "fidaxomicin", "dificid", "telavancin", "vibativ",
    "oritavancin", "orbactiv", "dalbavancin", "dalvance", "ceftolozane",
    "zerbaxa", "avycaz", "vabomere", "plazomicin", "zemdri", "eravacycline",
    "xerava", "omadacycline", "nuzyra", "lefamulin", "xenleta", "delafloxacin",
    "baxdela", "tinidazole", "tindamax", "secnidazole", "solosec",
    "pentamidine", "atovaquone", "mepron", "primaquine", "dapsone",
    "sulfadiazine", "pyrimethamine", "daraprim",
)

INSTRUCTION_VERBS: Tuple[str, ...] = ("give", "use", "apply", "take")

DOSE_UNITS = r"MCG|MG|GM|G|ML|UNITS?(?:/ML)?"

# (code, pattern) evaluated in order against the raw route text
ROUTE_CODES: Tuple[Tuple[str, str], ...] = (
    ("TOP", r"top"),
    ("PO", r"mouth|\bpo\b|oral"),
    ("IV", r"\biv\b|intraven"),
    ("ENT", r"g-?tube|enteral|\bng\b"),
    ("OPH", r"eye|oph"),
    ("IM", r"\bim\b|intramus"),
    ("SC", r"\bsc\b|subcut"),
)

TOPICAL_ROUTE = "TOP"

# (source, keyword patterns) in priority order
INFECTION_SOURCES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Urinary", (r"\buti", r"urine", r"urinary", r"cystitis", r"pyelo")),
    (
        "Respiratory",
        (r"pneum", r"\bresp", r"lung", r"bronch", r"copd", r"trach", r"aspirat", r"sinus"),
    ),
    (
        "GI",
        (r"\bgi\b", r"gastro", r"c\.?\s*diff", r"diarr", r"colitis", r"\babd", r"bowel"),
    ),
    (
        "Skin/Soft Tissue",
        (r"cellulit", r"wound", r"skin", r"ssti", r"abscess", r"ulcer", r"decub", r"pressure"),
    ),
    ("Bloodstream", (r"blood", r"bacterem", r"sepsis", r"\bbsi\b")),
)

MEDICATION_CLASSES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "Penicillins / Beta-lactams",
        ("amoxicillin", "amoxil", "augmentin", "ampicillin", "penicillin", r"pen\s?-?vk",
         "nafcillin", "oxacillin", "dicloxacillin", "piperacillin", "tazobactam", "zosyn"),
    ),
    (
        "Cephalosporins / Beta-lactams",
        ("ceftriaxone", "rocephin", "cephalexin", "keflex", "cefazolin", "ancef", "kefzol",
         "cefdinir", "omnicef", "cefuroxime", "ceftin", "cefixime", "suprax", "cefaclor",
         "ceclor", "cefotaxime", "claforan", "cefoxitin", "mefoxin", "ceftazidime", "fortaz",
         "tazicef", "cefepime", "maxipime", "ceftaroline", "teflaro", "ceftolozane",
         "cefpodoxime", "vantin"),
    ),
    ("Carbapenems", ("meropenem", "merrem", "imipenem", "primaxin", "ertapenem", "invanz", "vabomere")),
    ("Monobactams", ("aztreonam", "azactam")),
    (
        "Fluoroquinolones",
        ("ciprofloxacin", "cipro", "levofloxacin", "levaquin", "moxifloxacin", "avelox",
         "norfloxacin", "noroxin", "ofloxacin", "floxin", "delafloxacin", "baxdela",
         "gatifloxacin", "gemifloxacin", "factive"),
    ),
    (
        "Macrolides",
        ("azithromycin", "zithromax", "z-?pack", "erythromycin", "ery-?tab", "clarithromycin", "biaxin"),
    ),
    (
        "Tetracyclines",
        ("doxycycline", "doxy", "minocycline", "minocin", "tetracycline", "sumycin",
         "tigecycline", "tygacil", "eravacycline", "xerava", "omadacycline", "nuzyra"),
    ),
    (
        "Sulfonamides / Folate antagonists",
        ("sulfamethoxazole", "bactrim", "septra", "trimethoprim", "sulfadiazine", "dapsone",
         "pyrimethamine", "daraprim"),
    ),
    (
        "Nitrofurans / Urinary antibiotics",
        ("nitrofurantoin", "macrobid", "macrodantin", "fosfomycin", "monurol", "methenamine",
         "hiprex", "urex"),
    ),
    (
        "Glycopeptides / Lipoglycopeptides",
        ("vancomycin", "vancocin", "telavancin", "vibativ", "oritavancin", "orbactiv",
         "dalbavancin", "dalvance"),
    ),
    ("Oxazolidinones", ("linezolid", "zyvox")),
    ("Lipopeptides", ("daptomycin", "cubicin")),
    (
        "Aminoglycosides",
        ("gentamicin", "garamycin", "tobramycin", "tobrex", "amikacin", "amikin",
         "streptomycin", "kanamycin", "plazomicin", "zemdri", "neomycin"),
    ),
    ("Nitroimidazoles", ("metronidazole", "flagyl", "tinidazole", "tindamax", "secnidazole", "solosec")),
    ("Lincosamides", ("clindamycin", "cleocin")),
    ("Rifamycins", ("rifampin", "rifadin", "rifabutin")),
    ("Anti-TB agents", ("isoniazid", "inh", "pyrazinamide", "ethambutol", "myambutol")),
    (
        "Antifungals",
        ("fluconazole", "diflucan", "nystatin", "mycostatin", "caspofungin", "cancidas",
         "micafungin", "mycamine", "anidulafungin", "eraxis", "amphotericin", "ambisome",
         "voriconazole", "vfend", "posaconazole", "noxafil", "itraconazole", "sporanox",
         "terbinafine", "lamisil", "ketoconazole", "nizoral"),
    ),
    ("Antivirals", ("acyclovir", "valacyclovir", "valtrex", "famciclovir", "famvir", "oseltamivir", "tamiflu")),
    (
        "Topical antibacterials",
        ("mupirocin", "bactroban", "bacitracin", "neosporin", "silver sulfadiazine", "silvadene"),
    ),
    (
        "Other anti-infectives",
        ("fidaxomicin", "dificid", "colistin", "polymyxin", "pentamidine", "atovaquone",
         "mepron", "primaquine", "lefamulin", "xenleta"),
    ),
)

# Suffix fallbacks when the exact generic/brand is not in the class table
CLASS_SUFFIXES: Tuple[Tuple[str, str], ...] = (
    ("Beta-lactam antibiotics", r"cillin\b|penem\b|\bcef\w*"),
    ("Fluoroquinolones", r"floxacin\b"),
    ("Tetracyclines", r"cycline\b"),
    ("Other mycin-class anti-infectives", r"mycin\b"),
)

INDICATION_CLASS_HINTS: Tuple[Tuple[str, str], ...] = (
    ("Urinary antibiotics", r"\b(uti|urinary|cystitis|pyelonephritis)\b"),
    ("Respiratory anti-infectives", r"\b(pneumonia|respiratory|bronchitis|copd|sinusitis)\b"),
    ("Skin/soft tissue anti-infectives", r"\b(cellulitis|wound|skin|ssti|abscess)\b"),
    ("GI/anaerobic anti-infectives", r"\b(c\.?\s?diff|colitis|abdominal|intra-?abdominal|anaerobic)\b"),
)


def word_alternation(words) -> "re.Pattern[str]":
    """Compile a case-insensitive whole-word alternation, longest entries first."""
    alts = sorted(set(words), key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(alts) + r")\b", re.IGNORECASE)
