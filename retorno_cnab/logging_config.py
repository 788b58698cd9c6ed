"""Configuração de logging do pacote."""

import logging

FORMATO_LOG = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_NOME_RAIZ = "retorno_cnab"


def configurar_logging(nivel="INFO", stream=None):
    """
    Instala um único handler no logger ``retorno_cnab``. Chamadas repetidas
    só ajustam o nível.
    """
    logger = logging.getLogger(_NOME_RAIZ)
    logger.setLevel(nivel)
    if not any(getattr(h, "_retorno_cnab", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(FORMATO_LOG))
        handler._retorno_cnab = True
        logger.addHandler(handler)
    return logger
