"""Boleto e o histórico de eventos aplicados a ele."""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple

from .cnab400.ocorrencias import EventoLiquidacao, TipoEvento


class StatusBoleto(Enum):
    EMITIDO = "emitido"
    PAGO = "pago"
    BAIXADO = "baixado"
    REJEITADO = "rejeitado"
    PROTESTADO = "protestado"


@dataclass(frozen=True)
class EventoAplicado:
    """Entrada do histórico do boleto, gravada junto com cada atualização."""

    tipo: TipoEvento
    codigo_ocorrencia: str
    data_efetiva: Optional[date]
    valor: Optional[int]
    aplicado_em: datetime
    valor_juros: Optional[int] = None
    valor_desconto: Optional[int] = None
    valor_abatimento: Optional[int] = None
    valor_tarifa: Optional[int] = None
    motivo_rejeicao: Optional[str] = None
    posicao_origem: Optional[int] = None

    @classmethod
    def de_evento(cls, evento: EventoLiquidacao, aplicado_em: datetime):
        return cls(
            tipo=evento.tipo,
            codigo_ocorrencia=evento.codigo_ocorrencia,
            data_efetiva=evento.data_efetiva,
            valor=evento.valor_referencia,
            aplicado_em=aplicado_em,
            valor_juros=evento.valor_juros,
            valor_desconto=evento.valor_desconto,
            valor_abatimento=evento.valor_abatimento,
            valor_tarifa=evento.valor_tarifa,
            motivo_rejeicao=evento.motivo_rejeicao,
            posicao_origem=evento.detalhe.posicao,
        )

    def mesmo_conteudo(self, evento: EventoLiquidacao) -> bool:
        """
        Mesmo tipo, código, data e valor. Na liquidação o código não entra:
        o mesmo pagamento pode voltar como 06, 15 ou 17.
        """
        if self.tipo != evento.tipo:
            return False
        if self.tipo != TipoEvento.PAGO and self.codigo_ocorrencia != evento.codigo_ocorrencia:
            return False
        return (
            self.data_efetiva == evento.data_efetiva
            and self.valor == evento.valor_referencia
        )


@dataclass(frozen=True)
class Transacao:
    """
    Lançamento financeiro de uma liquidação, gravado junto com a
    atualização do boleto. ``valor_liquido`` é o pago menos a tarifa.
    """

    nosso_numero: str
    codigo_ocorrencia: str
    data_pagamento: date
    valor_pago: int
    valor_liquido: int
    registrada_em: datetime
    valor_juros: Optional[int] = None
    valor_desconto: Optional[int] = None
    valor_abatimento: Optional[int] = None
    valor_tarifa: Optional[int] = None

    @classmethod
    def de_pagamento(cls, nosso_numero: str, evento: EventoAplicado):
        return cls(
            nosso_numero=nosso_numero,
            codigo_ocorrencia=evento.codigo_ocorrencia,
            data_pagamento=evento.data_efetiva,
            valor_pago=evento.valor,
            valor_liquido=evento.valor - (evento.valor_tarifa or 0),
            registrada_em=evento.aplicado_em,
            valor_juros=evento.valor_juros,
            valor_desconto=evento.valor_desconto,
            valor_abatimento=evento.valor_abatimento,
            valor_tarifa=evento.valor_tarifa,
        )


@dataclass(frozen=True)
class AtualizacaoBoleto:
    """
    Instrução de atualização produzida pela conciliação.

    ``versao_esperada`` é a versão do boleto lida na decisão; o repositório
    recusa a gravação se o boleto tiver mudado nesse meio tempo.
    ``transacao`` acompanha as liquidações e é gravada na mesma operação.
    """

    nosso_numero: str
    status_anterior: StatusBoleto
    novo_status: StatusBoleto
    evento: EventoAplicado
    versao_esperada: int
    status_pre_protesto: Optional[StatusBoleto] = None
    transacao: Optional[Transacao] = None


@dataclass(frozen=True)
class Boleto:
    nosso_numero: str
    status: StatusBoleto = StatusBoleto.EMITIDO
    valor_titulo: Optional[int] = None
    seu_numero: Optional[str] = None
    valor_pago: Optional[int] = None
    data_pagamento: Optional[date] = None
    status_pre_protesto: Optional[StatusBoleto] = None
    versao: int = 0
    eventos: Tuple[EventoAplicado, ...] = ()

    def ultimo_evento(self, tipo: TipoEvento) -> Optional[EventoAplicado]:
        for evento in reversed(self.eventos):
            if evento.tipo == tipo:
                return evento
        return None

    def ja_aplicado(self, evento: EventoLiquidacao) -> bool:
        return any(aplicado.mesmo_conteudo(evento) for aplicado in self.eventos)

    def com_atualizacao(self, atualizacao: AtualizacaoBoleto) -> "Boleto":
        evento = atualizacao.evento
        mudancas = {
            "status": atualizacao.novo_status,
            "status_pre_protesto": atualizacao.status_pre_protesto,
            "versao": self.versao + 1,
            "eventos": self.eventos + (evento,),
        }
        if evento.tipo == TipoEvento.PAGO:
            mudancas["valor_pago"] = evento.valor
            mudancas["data_pagamento"] = evento.data_efetiva
        elif evento.tipo == TipoEvento.VALOR_ALTERADO:
            mudancas["valor_titulo"] = evento.valor
        return replace(self, **mudancas)
