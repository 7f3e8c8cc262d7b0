"""Tests for parsing raw model answers into triage results."""

import pytest

from helpbox.config import Priority
from helpbox.core import EmptyModelOutputException
from helpbox.triage.domain import (
    NON_TECHNICAL_MESSAGE,
    TriageResult,
    parse_model_output,
    strip_leaked_rationale,
)


@pytest.mark.parametrize("code", ["A", "M", "B"])
def test_valid_code_is_kept(code):
    result = parse_model_output(f"{code}|Reinicie o roteador.")
    assert result.priority == Priority(code)
    assert result.solution == "Reinicie o roteador."


def test_code_is_trimmed_and_upper_cased():
    result = parse_model_output("  a |  Limpe o cache do navegador.  ")
    assert result.priority == Priority.HIGH
    assert result.solution == "Limpe o cache do navegador."


def test_split_happens_at_first_separator_only():
    result = parse_model_output("B|Use o atalho Ctrl|Shift|Esc para abrir o gerenciador.")
    assert result.priority == Priority.LOW
    assert result.solution == "Use o atalho Ctrl|Shift|Esc para abrir o gerenciador."


def test_missing_separator_defaults_to_medium_with_full_text():
    result = parse_model_output("Reinstale o driver da impressora.")
    assert result.priority == Priority.MEDIUM
    assert result.solution == "Reinstale o driver da impressora."


def test_invalid_code_keeps_full_text():
    result = parse_model_output("X|Verifique os cabos.")
    assert result.priority == Priority.MEDIUM
    assert result.solution == "X|Verifique os cabos."


def test_multi_letter_code_is_invalid():
    result = parse_model_output("Alta|Troque o teclado.")
    assert result.priority == Priority.MEDIUM
    assert result.solution == "Alta|Troque o teclado."


@pytest.mark.parametrize("raw", ["", "   ", "\n\t ", None])
def test_empty_output_raises(raw):
    with pytest.raises(EmptyModelOutputException):
        parse_model_output(raw)


def test_non_technical_message_is_returned_verbatim():
    result = parse_model_output(f"B|{NON_TECHNICAL_MESSAGE}")
    assert result == TriageResult.non_technical()


def test_non_technical_message_wins_even_with_wrong_code():
    result = parse_model_output(f"A|{NON_TECHNICAL_MESSAGE}")
    assert result.priority == Priority.LOW
    assert result.solution == NON_TECHNICAL_MESSAGE


def test_rationale_block_is_removed():
    raw = (
        "A|**Cálculo de Prioridade:** frequência 3 + impacto 3 + abrangência 3 = 9\n\n"
        "**Solução Sugerida:** Desligue o equipamento da tomada e aguarde 30 segundos."
    )
    result = parse_model_output(raw)
    assert result.priority == Priority.HIGH
    assert "Cálculo" not in result.solution
    assert "= 9" not in result.solution
    assert result.solution.endswith("Desligue o equipamento da tomada e aguarde 30 segundos.")


def test_rationale_without_solution_heading_is_cut_to_the_end():
    raw = "M|Reinicie o serviço de impressão.\n\nCálculo da prioridade: 2 + 2 + 1 = 5"
    result = parse_model_output(raw)
    assert result.solution == "Reinicie o serviço de impressão."


def test_bold_analysis_headings_are_removed():
    text = "**Análise:** o erro indica falta de memória.\n\n\n\nFeche os programas abertos."
    cleaned = strip_leaked_rationale(text)
    assert "Análise" not in cleaned
    assert "\n\n\n" not in cleaned
    assert cleaned.startswith("o erro indica falta de memória.")


def test_clean_text_is_left_alone():
    text = "**Olá!**\n\n1. Abra o menu Iniciar.\n2. Procure por *Impressoras*."
    assert strip_leaked_rationale(text) == text


def test_rationale_only_answer_leaves_empty_solution():
    result = parse_model_output("M|Cálculo de prioridade: 1 + 2 + 2 = 5")
    assert result.priority == Priority.MEDIUM
    assert result.solution == ""


@pytest.mark.parametrize("raw", [
    "a | Reinicie o roteador.",
    "Sem separador algum",
    "X|código inválido",
    "**Análise:** soma 7\n**Solução:** Troque o cabo.",
])
def test_parsing_is_deterministic(raw):
    assert parse_model_output(raw) == parse_model_output(raw)
