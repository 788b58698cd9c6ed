"""Configuração central do processador de retorno."""
from __future__ import annotations

import os
from dataclasses import dataclass

PREFIXO_AMBIENTE = "RETORNO_CNAB_"


@dataclass(slots=True, frozen=True)
class Configuracao:
    encoding: str = "latin-1"
    banco_dados: str = "retorno_cnab.sqlite3"
    nivel_log: str = "INFO"
    tamanho_excerto: int = 80


def carregar_configuracao(ambiente=None) -> Configuracao:
    """
    Lê a configuração das variáveis ``RETORNO_CNAB_*``; ausentes ficam no padrão.
    """
    ambiente = os.environ if ambiente is None else ambiente
    padrao = Configuracao()

    def _ler(nome, default):
        return ambiente.get(PREFIXO_AMBIENTE + nome, default)

    tamanho = _ler("TAMANHO_EXCERTO", str(padrao.tamanho_excerto))
    try:
        tamanho_excerto = int(tamanho)
    except ValueError:
        raise ValueError(f"{PREFIXO_AMBIENTE}TAMANHO_EXCERTO inválido: '{tamanho}'") from None

    return Configuracao(
        encoding=_ler("ENCODING", padrao.encoding),
        banco_dados=_ler("BANCO_DADOS", padrao.banco_dados),
        nivel_log=_ler("NIVEL_LOG", padrao.nivel_log).upper(),
        tamanho_excerto=tamanho_excerto,
    )
