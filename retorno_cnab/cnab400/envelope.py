"""Conferência estrutural do arquivo: header, trailer, quantidade, total e sequência."""

import logging

from ..base import formatar_centavos, identificar_banco
from ..erros import EnvelopeError
from .layout_sicredi import CNAB400_SICREDI_CODIGO_BANCO
from .registros import RegistroDetalhe, RegistroHeader, RegistroTrailer

logger = logging.getLogger(__name__)


def _validar_header(headers, primeira_posicao, problemas, avisos):
    if not headers:
        problemas.append("Arquivo de retorno sem registro header (tipo 0).")
        return None
    if len(headers) > 1:
        linhas = ", ".join(str(h.posicao) for h in headers)
        problemas.append(f"Foi encontrado mais de um registro header (linhas {linhas}).")
    header = headers[0]
    if header.posicao != primeira_posicao:
        problemas.append(
            f"Header encontrado na linha {header.posicao}; deveria ser o primeiro registro do arquivo."
        )
    if header.codigo_banco != CNAB400_SICREDI_CODIGO_BANCO:
        codigo, nome = identificar_banco(header.codigo_banco)
        problemas.append(
            f"Header: código do banco (pos. 077-079) é '{codigo or ''}' ({nome}), "
            f"esperado {CNAB400_SICREDI_CODIGO_BANCO} (Sicredi)."
        )
    if (header.literal_retorno or "").upper() != "RETORNO":
        avisos.append("Header: literal (pos. 003-009) deveria ser 'RETORNO'.")
    if (header.literal_servico or "").upper() != "COBRANCA":
        avisos.append("Header: literal de serviço (pos. 012-026) deveria ser 'COBRANCA'.")
    if "SICREDI" not in (header.literal_banco or "").upper():
        avisos.append("Header: literal do banco (pos. 080-094) deveria mencionar 'SICREDI'.")
    return header


def _validar_trailer(trailers, ultima_posicao, problemas):
    if not trailers:
        problemas.append("Arquivo de retorno sem registro trailer (tipo 9).")
        return None
    if len(trailers) > 1:
        linhas = ", ".join(str(t.posicao) for t in trailers)
        problemas.append(f"Foi encontrado mais de um registro trailer (linhas {linhas}).")
    trailer = trailers[-1]
    if trailer.posicao != ultima_posicao:
        problemas.append(
            f"Trailer encontrado na linha {trailer.posicao}; deveria ser o último registro do arquivo."
        )
    return trailer


def _validar_quantidade(trailer, posicoes_detalhe, problemas):
    declarada = trailer.quantidade_titulos
    if declarada is None:
        problemas.append("Trailer: quantidade de títulos (pos. 018-025) não informada.")
    elif declarada != len(posicoes_detalhe):
        problemas.append(
            f"Trailer declara {declarada} título(s), mas o arquivo possui {len(posicoes_detalhe)} registro(s) de detalhe."
        )


def _validar_total(trailer, posicoes_detalhe, problemas):
    declarado = trailer.valor_total
    if declarado is None:
        problemas.append("Trailer: valor total (pos. 026-039) não informado.")
        return
    ilegiveis = [p for p in posicoes_detalhe if p.valor_titulo is None and not isinstance(p, RegistroDetalhe)]
    if ilegiveis:
        linhas = ", ".join(str(p.posicao) for p in ilegiveis)
        problemas.append(
            f"Valor do título ilegível nas linhas {linhas}; o total do trailer não pode ser conferido."
        )
        return
    soma = sum(p.valor_titulo or 0 for p in posicoes_detalhe)
    if soma != declarado:
        problemas.append(
            f"Trailer declara valor total R$ {formatar_centavos(declarado)}, "
            f"mas a soma dos títulos é R$ {formatar_centavos(soma)}."
        )


def _base_sequencia(header, posicoes_detalhe):
    """
    Os detalhes são numerados 1..N. Arquivos gerados pelo banco numeram
    todos os registros a partir do header (header 000001, detalhes 2..N+1);
    esse formato só é aceito quando o primeiro detalhe segue o header.
    """
    if not header or not header.sequencia or not posicoes_detalhe:
        return 0
    if posicoes_detalhe[0].sequencia == header.sequencia + 1:
        return header.sequencia
    return 0


def _validar_sequencia(header, posicoes_detalhe, problemas):
    base = _base_sequencia(header, posicoes_detalhe)
    for ordem, registro in enumerate(posicoes_detalhe, start=1):
        esperado = base + ordem
        if registro.sequencia is None:
            problemas.append(
                f"Linha {registro.posicao}: sequência (pos. 395-400) ilegível; esperado {esperado:06d}."
            )
            return
        if registro.sequencia != esperado:
            problemas.append(
                f"Linha {registro.posicao}: sequência do registro {registro.sequencia:06d} "
                f"não segue a ordem esperada ({esperado:06d})."
            )
            return


def validar_envelope(registros, ilegiveis=()):
    """
    Confere o envelope do arquivo depois que todas as linhas foram classificadas.

    ``registros`` são os registros tipados na ordem do arquivo e
    ``ilegiveis`` as ``LinhaIlegivel`` das linhas que falharam antes disso.
    Todas as verificações rodam e os problemas são acumulados; se houver
    algum, levanta ``EnvelopeError`` com a lista completa. Devolve os
    avisos não fatais.
    """
    problemas = []
    avisos = []

    posicoes = sorted([r.posicao for r in registros] + [i.posicao for i in ilegiveis])
    if not posicoes:
        raise EnvelopeError(["Arquivo de retorno vazio: nenhum registro encontrado."])

    headers = [r for r in registros if isinstance(r, RegistroHeader)]
    trailers = [r for r in registros if isinstance(r, RegistroTrailer)]
    posicoes_detalhe = sorted(
        [r for r in registros if isinstance(r, RegistroDetalhe)]
        + [i for i in ilegiveis if i.ocupa_posicao_de_detalhe],
        key=lambda r: r.posicao,
    )

    header = _validar_header(headers, posicoes[0], problemas, avisos)
    trailer = _validar_trailer(trailers, posicoes[-1], problemas)
    if trailer:
        _validar_quantidade(trailer, posicoes_detalhe, problemas)
        _validar_total(trailer, posicoes_detalhe, problemas)
    _validar_sequencia(header, posicoes_detalhe, problemas)

    if problemas:
        for problema in problemas:
            logger.warning("Envelope inválido: %s", problema)
        raise EnvelopeError(problemas)
    return avisos
