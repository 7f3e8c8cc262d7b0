"""Tests for the triage service: prompt, short-circuit and fallbacks."""

import pytest

from helpbox.config import Frequency, Impact, Priority, Scope, Settings, TicketCategory
from helpbox.core import LLMException
from helpbox.triage.application import RetryController, TriageService
from helpbox.triage.domain import (
    FALLBACK_MESSAGE,
    HARDWARE_HANDOFF_MESSAGE,
    NOT_INFORMED,
    SHORT_DESCRIPTION_MESSAGE,
    TriagePromptBuilder,
    TriageRequest,
)
from helpbox.triage.infrastructure import (
    LLMClientAdapter,
    build_triage_service,
    build_triage_service_or_unavailable,
)
from helpbox.infrastructure.llm import MockLLMClient, UnavailableLLMClient

from tests.conftest import FakeLLMClient, RecordingSleep, unavailable


def make_request(description="O computador desliga sozinho depois de alguns minutos.", **kwargs):
    fields = dict(
        category=TicketCategory.HARDWARE,
        title="Computador desligando",
        description=description,
        frequency=Frequency.CONTINUOUS,
        impact=Impact.BLOCKED,
        scope=Scope.ME,
    )
    fields.update(kwargs)
    return TriageRequest(**fields)


def make_service(llm, sleep=None):
    return TriageService(llm, RetryController(sleep=sleep or RecordingSleep()))


@pytest.mark.asyncio
@pytest.mark.parametrize("description", ["", "abc", "  oi  ", "    "])
async def test_short_description_skips_model(description):
    llm = FakeLLMClient("A|não deveria ser chamado")

    result = await make_service(llm).triage(make_request(description=description))

    assert result.priority == Priority.LOW
    assert result.solution == SHORT_DESCRIPTION_MESSAGE
    assert llm.calls == 0


@pytest.mark.asyncio
async def test_five_meaningful_characters_reach_the_model():
    llm = FakeLLMClient("B|Verifique a conexão.")

    result = await make_service(llm).triage(make_request(description="  tela  "))

    assert llm.calls == 0
    assert result.solution == SHORT_DESCRIPTION_MESSAGE

    result = await make_service(llm).triage(make_request(description=" tela1 "))

    assert llm.calls == 1
    assert result.priority == Priority.LOW


@pytest.mark.asyncio
async def test_successful_triage_returns_parsed_result():
    llm = FakeLLMClient("A|**Olá!** Verifique se a fonte está bem conectada.")

    result = await make_service(llm).triage(make_request())

    assert result.priority == Priority.HIGH
    assert result.solution == "**Olá!** Verifique se a fonte está bem conectada."


@pytest.mark.asyncio
async def test_transient_unavailability_is_retried():
    llm = FakeLLMClient(unavailable(), "M|Atualize o sistema.")
    sleep = RecordingSleep()

    result = await make_service(llm, sleep).triage(make_request())

    assert result.priority == Priority.MEDIUM
    assert result.solution == "Atualize o sistema."
    assert llm.calls == 2
    assert sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_persistent_unavailability_returns_fallback():
    llm = FakeLLMClient(unavailable())
    sleep = RecordingSleep()

    result = await make_service(llm, sleep).triage(make_request())

    assert result.priority == Priority.MEDIUM
    assert result.solution == FALLBACK_MESSAGE
    assert llm.calls == 3
    assert sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_empty_answer_returns_fallback_without_retry():
    llm = FakeLLMClient("   ", "A|nunca usado")

    result = await make_service(llm).triage(make_request())

    assert result.is_fallback
    assert llm.calls == 1


@pytest.mark.asyncio
async def test_unexpected_error_never_escapes():
    llm = FakeLLMClient(RuntimeError("socket closed"))

    result = await make_service(llm).triage(make_request())

    assert result.solution == FALLBACK_MESSAGE


@pytest.mark.asyncio
async def test_server_error_is_not_retried():
    llm = FakeLLMClient(LLMException("Internal Server Error", upstream_status=500))

    result = await make_service(llm).triage(make_request())

    assert result.is_fallback
    assert llm.calls == 1


@pytest.mark.asyncio
async def test_prompt_carries_ticket_fields():
    llm = FakeLLMClient("M|ok")

    await make_service(llm).triage(make_request(title="Monitor piscando"))

    prompt = llm.prompts[0]
    assert "Monitor piscando" in prompt
    assert "Hardware" in prompt
    assert "O computador desliga sozinho depois de alguns minutos." in prompt
    assert HARDWARE_HANDOFF_MESSAGE in prompt
    assert "LETRA|" in prompt


def test_prompt_marks_missing_answers_as_not_informed():
    prompt = TriagePromptBuilder.build_prompt(
        make_request(frequency=None, impact=None, scope=None)
    )
    assert prompt.count(NOT_INFORMED) >= 3


@pytest.mark.asyncio
async def test_build_triage_service_uses_given_client():
    service = build_triage_service(client=MockLLMClient("B|Reinicie o navegador."))

    result = await service.triage(make_request())

    assert result.priority == Priority.LOW
    assert result.solution == "Reinicie o navegador."


@pytest.mark.asyncio
async def test_adapter_delegates_to_client():
    adapter = LLMClientAdapter(MockLLMClient("A|Desligue o estabilizador."))

    response = await adapter.generate("prompt")

    assert response.content == "A|Desligue o estabilizador."
    assert response.model == "mock-model"


@pytest.mark.asyncio
async def test_request_with_raw_values_is_triaged():
    llm = FakeLLMClient("A|Verifique o cabo de energia.")
    request = TriageRequest(
        category="Software",
        title="Sistema travando",
        description="O ERP trava ao gerar relatórios.",
        frequency="Continuous",
        impact="Blocked",
        scope="All",
    )

    result = await make_service(llm).triage(request)

    assert request.category is TicketCategory.SOFTWARE
    assert request.scope is Scope.ALL
    assert result.priority == Priority.HIGH
    assert "Software" in llm.prompts[0]


@pytest.mark.asyncio
async def test_unavailable_client_raises_without_upstream_status():
    with pytest.raises(LLMException) as exc_info:
        await UnavailableLLMClient("Z.AI API key not configured").generate("prompt")

    assert exc_info.value.upstream_status is None


@pytest.mark.asyncio
async def test_missing_api_key_gives_fallback_not_canned_answer():
    config = Settings(mock_llm=False, llm_provider="zai", zai_api_key=None)

    service = build_triage_service_or_unavailable(config)
    result = await service.triage(make_request())

    assert result.is_fallback
    assert result.solution == FALLBACK_MESSAGE
