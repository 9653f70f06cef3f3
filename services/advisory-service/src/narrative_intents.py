"""
Deterministic intent extraction from the user's free-text financial story.

Each topic flag is a case-insensitive substring match against a fixed phrase
table. Housing is split into rental upgrade vs home purchase with phrase
combinations because the two lead to different strategies downstream.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Tuple

from finance_model import LifestyleUpgradeIntent, NarrativeIntents

# (flag attribute, raw keyword label, trigger phrases) in reporting order
TOPIC_KEYWORDS: List[Tuple[str, str, Tuple[str, ...]]] = [
    (
        "mentions_insurance",
        "asuransi",
        ("asuransi", "bpjs", "proteksi", "jaminan kesehatan", "rawat inap", "klaim"),
    ),
    (
        "mentions_marriage",
        "pernikahan",
        ("nikah", "menikah", "pernikahan", "tunangan", "resepsi", "wedding"),
    ),
    (
        "mentions_confusion",
        "kebingungan",
        ("bingung", "tidak yakin", "ragu", "tidak tahu", "apakah perlu", "bagaimana cara", "sebaiknya"),
    ),
    (
        "mentions_investment",
        "investasi",
        ("saham", "emas", "crypto", "reksadana", "investasi", "obligasi", "trading", "p2p lending"),
    ),
    (
        "mentions_debt",
        "hutang",
        ("hutang", "cicilan", "kredit", "pinjaman", "kpr", "kartu kredit", "paylater", "lunas"),
    ),
    (
        "mentions_emergency",
        "dana darurat",
        ("dana darurat", "emergency fund", "cadangan", "jaga-jaga", "tabungan darurat"),
    ),
]

HOUSING_PHRASES = ("rumah", "apartemen", "properti", "dp rumah", "kpr", "sewa", "ngontrak", "kontrakan", "kos")

# Phrases alone, or an anchor word together with any of its companions
RENTAL_UPGRADE_PHRASES = ("pindah kontrakan", "pindah kos", "sewa lebih", "kontrakan lebih", "kos lebih")
RENTAL_UPGRADE_COMBOS = (
    ("pindah", ("sewa", "kontrakan", "kos")),
    ("upgrade", ("kontrakan", "kos")),
)
HOME_PURCHASE_PHRASES = ("beli rumah", "membeli rumah", "dp rumah", "kepemilikan rumah", "cicil rumah", "kpr")
HOME_PURCHASE_COMBOS = (("rumah", ("sendiri",)),)

LATER_TOPIC_KEYWORDS: List[Tuple[str, str, Tuple[str, ...]]] = [
    (
        "mentions_education",
        "pendidikan",
        ("pendidikan", "sekolah", "kuliah", "kursus", "les", "beasiswa"),
    ),
    (
        "mentions_retirement",
        "pensiun",
        ("pensiun", "hari tua", "retirement", "jht", "dana pensiun"),
    ),
    (
        "mentions_children",
        "keluarga",
        ("anak", "keluarga", "tanggungan", "hamil", "melahirkan"),
    ),
    (
        "mentions_side_income",
        "penghasilan tambahan",
        ("penghasilan tambahan", "usaha sampingan", "freelance", "bisnis", "passive income", "side hustle"),
    ),
    (
        "mentions_job_loss",
        "keamanan kerja",
        ("phk", "kehilangan pekerjaan", "kontrak habis", "resign", "pindah kerja"),
    ),
]

PURCHASE_VERBS = ("beli", "membeli", "buat beli", "mau beli", "ingin beli", "pengen beli", "rencana beli")
PURCHASE_ITEMS = (
    "iphone", "hp", "handphone", "smartphone", "ponsel",
    "laptop", "macbook", "notebook", "komputer", "pc",
    "motor", "mobil", "kendaraan",
    "kamera", "drone", "gadget",
    "tv", "televisi", "elektronik",
    "jam", "watch", "tas", "sepatu",
)

# Tried in order; the first recognizer that matches decides the amount.
_JUTA_PATTERN = re.compile(r"(\d+(?:[.,]\d+)?)\s*(juta|jt)", re.IGNORECASE)
_RIBU_PATTERN = re.compile(r"(\d+(?:[.,]\d+)?)\s*ribu", re.IGNORECASE)
_RUPIAH_PATTERN = re.compile(r"rp\s*(\d{1,3}(?:[.,]\d{3})*(?:[.,]\d+)?)", re.IGNORECASE)


def _scaled(multiplier: float) -> Callable[[re.Match[str]], float]:
    def convert(match: re.Match[str]) -> float:
        return float(match.group(1).replace(",", ".")) * multiplier

    return convert


def _grouped_digits(match: re.Match[str]) -> float:
    return float(int(re.sub(r"[.,]", "", match.group(1))))


AMOUNT_RECOGNIZERS: List[Tuple[re.Pattern[str], Callable[[re.Match[str]], float]]] = [
    (_JUTA_PATTERN, _scaled(1_000_000)),
    (_RIBU_PATTERN, _scaled(1_000)),
    (_RUPIAH_PATTERN, _grouped_digits),
]


def _contains_any(text: str, phrases: Iterable[str]) -> bool:
    return any(phrase in text for phrase in phrases)


def _matches(text: str, phrases: Iterable[str], combos: Iterable[Tuple[str, Tuple[str, ...]]]) -> bool:
    if _contains_any(text, phrases):
        return True
    return any(anchor in text and _contains_any(text, companions) for anchor, companions in combos)


def extract_amount(text: str | None) -> float | None:
    """
    Pull the first monetary amount out of a narrative.

    Recognizes "20 juta"/"2,5jt" (x1,000,000), "500 ribu" (x1,000) and "Rp 2.000.000"
    (separators stripped). Returns None when nothing matches.
    """
    if not text:
        return None
    for pattern, convert in AMOUNT_RECOGNIZERS:
        match = pattern.search(text)
        if match:
            return convert(match)
    return None


def detect_narrative_intents(story: str | None) -> NarrativeIntents:
    """
    Scan a financial story for topic flags, a lifestyle-change intent and the raw keyword labels.

    Args:
        story: Free-form narrative; None or blank yields an all-false result.
    Returns:
        NarrativeIntents with boolean flags, an optional LifestyleUpgradeIntent and the
        matched keyword labels in a fixed order.
    """
    intents = NarrativeIntents()
    if not story or not story.strip():
        return intents

    text = story.lower()
    keywords: List[str] = []

    for attribute, label, phrases in TOPIC_KEYWORDS:
        if _contains_any(text, phrases):
            setattr(intents, attribute, True)
            keywords.append(label)

    intents.mentions_housing = _contains_any(text, HOUSING_PHRASES)
    intents.mentions_rental_upgrade = _matches(text, RENTAL_UPGRADE_PHRASES, RENTAL_UPGRADE_COMBOS)
    intents.mentions_home_purchase = _matches(text, HOME_PURCHASE_PHRASES, HOME_PURCHASE_COMBOS)
    if intents.mentions_rental_upgrade:
        keywords.append("upgrade kontrakan")
    elif intents.mentions_home_purchase:
        keywords.append("beli rumah")
    elif intents.mentions_housing:
        keywords.append("rumah")

    for attribute, label, phrases in LATER_TOPIC_KEYWORDS:
        if _contains_any(text, phrases):
            setattr(intents, attribute, True)
            keywords.append(label)

    purchase_item = next((item for item in PURCHASE_ITEMS if item in text), None)
    intents.mentions_purchase = _contains_any(text, PURCHASE_VERBS) and purchase_item is not None
    if intents.mentions_purchase:
        keywords.append("pembelian barang")

    amount = extract_amount(text)
    if intents.mentions_rental_upgrade:
        intents.lifestyle_upgrade = LifestyleUpgradeIntent(
            type="rental_upgrade",
            description="Ingin pindah ke kontrakan/kos dengan harga lebih tinggi",
            amount=amount,
        )
    elif intents.mentions_home_purchase:
        intents.lifestyle_upgrade = LifestyleUpgradeIntent(
            type="home_purchase",
            description="Ingin membeli rumah",
            amount=amount,
        )
    elif intents.mentions_purchase and amount:
        intents.lifestyle_upgrade = LifestyleUpgradeIntent(
            type="purchase",
            description=f"Ingin membeli {purchase_item}",
            amount=amount,
        )

    intents.raw_keywords = keywords
    return intents
