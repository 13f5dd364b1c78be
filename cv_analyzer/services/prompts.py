from __future__ import annotations

from cv_analyzer.schemas.analysis import AnalysisRequest, OutputSizing

NOT_PROVIDED = "Nie podano"


def _format_rules(sizing: OutputSizing) -> str:
    return (
        "Zasady formatu (obowiązkowe):\n"
        "- Zwróć WYŁĄCZNIE poprawny obiekt JSON, bez komentarzy, bez bloków ``` i bez tekstu przed ani po nim.\n"
        f"- \"podsumowanie\": maksymalnie {sizing.summary_cap} znaków.\n"
        f"- Każdy element list \"mocne_strony\" i \"obszary_do_poprawy\": maksymalnie {sizing.item_cap} znaków, "
        f"najwyżej {sizing.max_list_items} elementów na listę.\n"
        f"- Każde pytanie: maksymalnie {sizing.question_cap} znaków.\n"
        f"- \"kompetencje_miekkie\": dokładnie {sizing.num_soft} pytań.\n"
        f"- \"kompetencje_twarde\": dokładnie {sizing.num_hard} pytań.\n"
        "- Nie podawaj własnej oceny procentowej dopasowania."
    )


def compose_cv_text(request: AnalysisRequest) -> str:
    text = (request.cv_text or "").strip()
    extra = (request.additional_text or "").strip()
    if extra:
        text = f"{text}\n\nDodatkowy opis od kandydata:\n{extra}".strip()
    return text


def build_analysis_prompt(
    request: AnalysisRequest,
    sizing: OutputSizing,
    *,
    combined_postings: str,
    industry_hint: str | None = None,
) -> str:
    return f"""Jesteś ekspertem HR. Analizujesz CV kandydata, ogłoszenia o pracę oraz (jeśli podano) dodatkowy opis i branżę.

=== Branża wybrana przez kandydata ===
{request.selected_industry or NOT_PROVIDED}

=== Branża rozpoznana w ogłoszeniach ===
{industry_hint or NOT_PROVIDED}

Twoje zadania:
1. Oceń CV ogólnie: mocne i słabe strony, rekomendowane zmiany.
2. Oceń dopasowanie CV do wszystkich ofert (wskaż dopasowania i braki).
3. Wygeneruj dokładnie {sizing.num_soft} pytań o kompetencje miękkie.
4. Wygeneruj dokładnie {sizing.num_hard} pytań o kompetencje twarde.

Zwróć odpowiedź w JSON o dokładnie takiej strukturze:
{{
  "podsumowanie": "...",
  "dopasowanie": {{
    "mocne_strony": ["..."],
    "obszary_do_poprawy": ["..."]
  }},
  "pytania": {{
    "kompetencje_miekkie": ["..."],
    "kompetencje_twarde": ["..."]
  }}
}}

{_format_rules(sizing)}

=== CV (z opisem kandydata) ===
{compose_cv_text(request) or NOT_PROVIDED}

=== OGŁOSZENIA ===
{combined_postings}
"""


def build_questions_prompt(
    combined_postings: str,
    sizing: OutputSizing,
    *,
    selected_industry: str | None = None,
    industry_hint: str | None = None,
) -> str:
    return f"""Jesteś doświadczonym rekruterem. Na podstawie ogłoszeń o pracę przygotuj pytania rekrutacyjne.

=== Branża wybrana przez kandydata ===
{selected_industry or NOT_PROVIDED}

=== Branża rozpoznana w ogłoszeniach ===
{industry_hint or NOT_PROVIDED}

Wygeneruj dokładnie {sizing.num_soft} pytań o kompetencje miękkie i dokładnie {sizing.num_hard} pytań o kompetencje twarde.

Zwróć odpowiedź w JSON o dokładnie takiej strukturze:
{{
  "pytania": {{
    "kompetencje_miekkie": ["..."],
    "kompetencje_twarde": ["..."]
  }}
}}

Zasady formatu (obowiązkowe):
- Zwróć WYŁĄCZNIE poprawny obiekt JSON, bez komentarzy, bez bloków ``` i bez tekstu przed ani po nim.
- Każde pytanie: maksymalnie {sizing.question_cap} znaków.

=== OGŁOSZENIA ===
{combined_postings}
"""


def build_posting_summary_prompt(combined_postings: str, sizing: OutputSizing) -> str:
    return f"""Jesteś ekspertem HR. Streść ogłoszenia o pracę dla kandydata.

Zwróć odpowiedź w JSON o dokładnie takiej strukturze:
{{
  "stanowisko": "...",
  "firma": "...",
  "podsumowanie": "...",
  "wymagania": ["..."],
  "obowiazki": ["..."]
}}

Zasady formatu (obowiązkowe):
- Zwróć WYŁĄCZNIE poprawny obiekt JSON, bez komentarzy, bez bloków ``` i bez tekstu przed ani po nim.
- "stanowisko" i "firma": maksymalnie 180 znaków; pusty tekst, jeśli nie wynika z ogłoszenia.
- "podsumowanie": maksymalnie {sizing.summary_cap} znaków.
- "wymagania" i "obowiazki": najwyżej {sizing.max_list_items} elementów, każdy maksymalnie {sizing.item_cap} znaków.

=== OGŁOSZENIA ===
{combined_postings}
"""
