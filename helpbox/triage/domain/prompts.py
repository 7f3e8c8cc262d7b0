"""
Triage Prompt Builder
=====================

Builds the single prompt sent to the model for a ticket.

All prompt wording lives here so the service only orchestrates.
"""

from typing import Optional

from helpbox.config import Frequency, Impact, Scope
from helpbox.triage.domain.entities import (
    HARDWARE_HANDOFF_MESSAGE,
    MAX_SOLUTION_LENGTH,
    NON_TECHNICAL_MESSAGE,
    NOT_INFORMED,
    TriageRequest,
)

FREQUENCY_LABELS = {
    Frequency.OCCASIONAL: "Ocasional",
    Frequency.CONTINUOUS: "Contínuo",
}

IMPACT_LABELS = {
    Impact.MINIMAL: "Mínimo (consigo trabalhar normalmente)",
    Impact.DELAY: "Atraso (consigo trabalhar, mas com dificuldade)",
    Impact.BLOCKED: "Bloqueado (não consigo trabalhar)",
}

SCOPE_LABELS = {
    Scope.ME: "Apenas eu",
    Scope.GROUP: "Meu setor / grupo",
    Scope.ALL: "Toda a empresa",
}


def _label(value: Optional[object], labels: dict) -> str:
    if value is None:
        return NOT_INFORMED
    return labels.get(value, str(value))


class TriagePromptBuilder:
    """
    Builds prompts for ticket triage.

    The scoring rubric is spelled out for the model but must never be
    echoed back; the parser strips it if it is.
    """

    INSTRUCTIONS = f"""Você é um Assistente de Suporte Técnico de primeira linha, focado em soluções imediatas e fáceis.
Analise o chamado abaixo, defina a prioridade e sugira os passos mais simples e eficazes de autoatendimento.

CÁLCULO INTERNO DE PRIORIDADE (uso exclusivamente interno, NUNCA mostre este cálculo na resposta):
- Frequência: Ocasional = 1, Contínuo = 3
- Impacto: Mínimo = 1, Atraso = 2, Bloqueado = 3
- Abrangência: Apenas eu = 1, Meu setor / grupo = 2, Toda a empresa = 3
Some os três pesos (campos não informados contam como o menor peso):
- 7 a 9 pontos: A (Alta)
- 4 a 6 pontos: M (Média)
- 3 pontos: B (Baixa)

FORMATO OBRIGATÓRIO DA RESPOSTA:
LETRA|texto da solução
- LETRA é exatamente uma de: A, M ou B.
- O texto da solução usa Markdown (negrito e listas), é breve e tem no máximo {MAX_SOLUTION_LENGTH} caracteres.
- Não exponha pesos, somas, análises nem justificativas da prioridade.

REGRAS ADICIONAIS:
- Se a solução envolver troca ou substituição de hardware, termine com a frase: "{HARDWARE_HANDOFF_MESSAGE}"
- Se a solicitação não for técnica (dúvidas de políticas internas, RH, treinamentos etc.), responda exatamente:
B|{NON_TECHNICAL_MESSAGE}"""

    @classmethod
    def build_prompt(cls, request: TriageRequest) -> str:
        """Build the triage prompt for one ticket."""
        return f"""{cls.INSTRUCTIONS}

---
DETALHES DO CHAMADO:
- Título: {request.title or NOT_INFORMED}
- Categoria: {request.category.value if request.category else NOT_INFORMED}
- Descrição do problema: {request.description}
- Frequência: {_label(request.frequency, FREQUENCY_LABELS)}
- Impacto: {_label(request.impact, IMPACT_LABELS)}
- Abrangência: {_label(request.scope, SCOPE_LABELS)}
---

Responda apenas no formato LETRA|texto da solução."""
