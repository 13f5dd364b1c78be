from __future__ import annotations

from pydantic import BaseModel

# Checked in this order; the first category with any keyword hit wins.
INDUSTRY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("IT", ("programista", "developer", "python", "java", "javascript", "devops", "backend", "frontend", "software", "tester")),
    ("Finanse", ("finanse", "księgowość", "księgowy", "controlling", "audyt", "bankowość", "analityk finansowy")),
    ("Marketing", ("marketing", "seo", "social media", "kampanie", "brand", "copywriter")),
    ("Sprzedaż", ("sprzedaż", "handlowiec", "key account", "sales", "przedstawiciel handlowy")),
    ("HR", ("rekrutacja", "kadry", "hr business partner", "employer branding", "płace")),
    ("Medycyna", ("lekarz", "pielęgniarka", "medyczny", "szpital", "farmaceuta", "przychodnia")),
    ("Logistyka", ("logistyka", "magazyn", "spedycja", "transport", "łańcuch dostaw")),
    ("Produkcja", ("produkcja", "operator maszyn", "inżynier produkcji", "utrzymanie ruchu")),
    ("Edukacja", ("nauczyciel", "edukacja", "szkoła", "wykładowca", "trener")),
    ("Prawo", ("prawnik", "radca prawny", "adwokat", "kancelaria", "compliance")),
)


class IndustryDetection(BaseModel):
    industry: str | None = None
    keyword: str | None = None


def detect_industry(text: str) -> IndustryDetection:
    lowered = (text or "").lower()
    if not lowered.strip():
        return IndustryDetection()
    for industry, keywords in INDUSTRY_KEYWORDS:
        for keyword in keywords:
            if keyword in lowered:
                return IndustryDetection(industry=industry, keyword=keyword)
    return IndustryDetection()
