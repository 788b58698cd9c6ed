"""Processamento completo de um arquivo de retorno CNAB 400 do Sicredi."""

import logging

from .cnab400.decodificador import TAMANHO_EXCERTO_PADRAO, decodificar_linha, separar_linhas
from .cnab400.envelope import validar_envelope
from .cnab400.ocorrencias import interpretar_ocorrencia
from .cnab400.registros import LinhaIlegivel, RegistroDetalhe, classificar_registro
from .conciliacao import Desfecho, MotorConciliacao
from .erros import ERROS_DE_LINHA, EnvelopeError
from .resultado import AcumuladorLote, ResultadoLote

logger = logging.getLogger(__name__)


class ProcessadorRetorno:
    """
    Lê, confere e concilia um arquivo de retorno.

    Etapas: leitura e classificação de todas as linhas, conferência do
    envelope, e então interpretação e conciliação de cada detalhe, na ordem
    do arquivo. Erros de uma linha são registrados no resultado e o
    processamento segue; só um envelope inválido interrompe o lote, antes
    de qualquer gravação. Cada evento aceito é gravado na hora, então
    reprocessar o mesmo arquivo é seguro.

    Uma instância não guarda estado entre chamadas de ``processar``.
    """

    def __init__(self, repositorio, motor=None, encoding="latin-1",
                 tamanho_excerto=TAMANHO_EXCERTO_PADRAO):
        self.motor = motor or MotorConciliacao(repositorio)
        self.encoding = encoding
        self.tamanho_excerto = tamanho_excerto

    @classmethod
    def de_configuracao(cls, repositorio, configuracao):
        return cls(
            repositorio,
            encoding=configuracao.encoding,
            tamanho_excerto=configuracao.tamanho_excerto,
        )

    def processar(self, conteudo, nome_arquivo="<retorno>") -> ResultadoLote:
        linhas = separar_linhas(conteudo, self.encoding)
        logger.info("Processando %s: %d registro(s).", nome_arquivo, len(linhas))

        acumulador = AcumuladorLote(total_linhas=len(linhas))
        registros, ilegiveis = self._classificar(linhas, acumulador)

        try:
            avisos = validar_envelope(registros, ilegiveis)
        except EnvelopeError as exc:
            logger.error("Arquivo %s rejeitado: %s", nome_arquivo, exc)
            return ResultadoLote.de_envelope_invalido(len(linhas), exc)
        acumulador.avisos.extend(avisos)

        for registro in registros:
            if isinstance(registro, RegistroDetalhe):
                self._conciliar_detalhe(registro, acumulador)

        resultado = acumulador.finalizar()
        logger.info(
            "Arquivo %s processado: %d aplicado(s), %d duplicado(s), %d anomalia(s), %d erro(s).",
            nome_arquivo,
            resultado.aplicados,
            resultado.duplicados,
            resultado.anomalias,
            len(resultado.erros),
        )
        return resultado

    def _classificar(self, linhas, acumulador):
        registros = []
        ilegiveis = []
        for linha in linhas:
            excerto = linha.excerto(self.tamanho_excerto)
            try:
                campos = decodificar_linha(linha, self.tamanho_excerto)
                registros.append(classificar_registro(campos, linha.posicao, excerto))
            except ERROS_DE_LINHA as exc:
                logger.warning("%s", exc)
                acumulador.registrar_erro(exc)
                ilegiveis.append(LinhaIlegivel.de_linha(linha))
        return registros, ilegiveis

    def _conciliar_detalhe(self, detalhe, acumulador):
        try:
            evento = interpretar_ocorrencia(detalhe)
            resultado = self.motor.conciliar(evento)
        except ERROS_DE_LINHA as exc:
            logger.warning("%s", exc)
            acumulador.registrar_erro(exc)
            return

        if resultado.desfecho == Desfecho.APLICADO:
            acumulador.aplicados += 1
        elif resultado.desfecho == Desfecho.DUPLICADO:
            acumulador.duplicados += 1
        elif resultado.desfecho == Desfecho.ANOMALIA:
            acumulador.anomalias += 1
            acumulador.avisos.append(resultado.mensagem)
        else:
            acumulador.nao_reconhecidos += 1
            acumulador.avisos.append(
                f"Linha {detalhe.posicao}: ocorrência '{detalhe.codigo_ocorrencia}' não reconhecida; "
                f"boleto {detalhe.nosso_numero} não foi alterado."
            )
