"""Acesso aos boletos: interface usada pela conciliação e duas implementações."""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from .cnab400.ocorrencias import TipoEvento
from .modelos import AtualizacaoBoleto, Boleto, EventoAplicado, StatusBoleto, Transacao

logger = logging.getLogger(__name__)


class RepositorioBoletos(ABC):
    """
    Persistência dos boletos. A conciliação só decide o próximo status;
    durabilidade e serialização por nosso número ficam aqui.
    """

    @abstractmethod
    def buscar_por_nosso_numero(self, nosso_numero: str) -> Optional[Boleto]:
        """Devolve o boleto ou ``None`` quando não existe."""

    @abstractmethod
    def aplicar_atualizacao(self, atualizacao: AtualizacaoBoleto) -> bool:
        """
        Grava a atualização. Devolve ``False`` (conflito) quando o boleto
        não está mais na versão em que a decisão foi tomada.
        """


class RepositorioMemoria(RepositorioBoletos):
    def __init__(self, boletos=()):
        self._boletos = {}
        self._transacoes = []
        self._lock = threading.Lock()
        for boleto in boletos:
            self.cadastrar(boleto)

    def cadastrar(self, boleto: Boleto):
        with self._lock:
            self._boletos[boleto.nosso_numero] = boleto

    def buscar_por_nosso_numero(self, nosso_numero):
        with self._lock:
            return self._boletos.get(nosso_numero)

    def aplicar_atualizacao(self, atualizacao):
        with self._lock:
            atual = self._boletos.get(atualizacao.nosso_numero)
            if atual is None or atual.versao != atualizacao.versao_esperada:
                return False
            self._boletos[atualizacao.nosso_numero] = atual.com_atualizacao(atualizacao)
            if atualizacao.transacao is not None:
                self._transacoes.append(atualizacao.transacao)
            return True

    def listar(self):
        with self._lock:
            return list(self._boletos.values())

    def listar_transacoes(self, nosso_numero=None):
        with self._lock:
            if nosso_numero is None:
                return list(self._transacoes)
            return [t for t in self._transacoes if t.nosso_numero == nosso_numero]


_SCHEMA = """
CREATE TABLE IF NOT EXISTS boletos (
    nosso_numero TEXT PRIMARY KEY,
    seu_numero TEXT,
    status TEXT NOT NULL,
    valor_titulo INTEGER,
    valor_pago INTEGER,
    data_pagamento TEXT,
    status_pre_protesto TEXT,
    versao INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS boleto_eventos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nosso_numero TEXT NOT NULL REFERENCES boletos (nosso_numero),
    tipo TEXT NOT NULL,
    codigo_ocorrencia TEXT NOT NULL,
    data_efetiva TEXT,
    valor INTEGER,
    valor_juros INTEGER,
    valor_desconto INTEGER,
    valor_abatimento INTEGER,
    valor_tarifa INTEGER,
    motivo_rejeicao TEXT,
    posicao_origem INTEGER,
    aplicado_em TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_boleto_eventos_nosso_numero
    ON boleto_eventos (nosso_numero);
CREATE TABLE IF NOT EXISTS transacoes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nosso_numero TEXT NOT NULL REFERENCES boletos (nosso_numero),
    codigo_ocorrencia TEXT NOT NULL,
    data_pagamento TEXT NOT NULL,
    valor_pago INTEGER NOT NULL,
    valor_juros INTEGER,
    valor_desconto INTEGER,
    valor_abatimento INTEGER,
    valor_tarifa INTEGER,
    valor_liquido INTEGER NOT NULL,
    registrada_em TEXT NOT NULL
);
"""


def _iso(valor):
    return valor.isoformat() if valor is not None else None


def _data(valor):
    return date.fromisoformat(valor) if valor else None


def _status(valor):
    return StatusBoleto(valor) if valor else None


class RepositorioSQLite(RepositorioBoletos):
    """
    Boletos em SQLite. A conexão é fornecida por quem chama; as gravações
    passam por um lock e por uma verificação de ``versao`` no UPDATE.
    """

    def __init__(self, db_connection):
        self.conn = db_connection
        self._lock = threading.Lock()
        self.criar_tabelas()

    def criar_tabelas(self):
        with self._lock:
            self.conn.executescript(_SCHEMA)
            self.conn.commit()

    def cadastrar(self, boleto: Boleto):
        with self._lock, self.conn:
            self.conn.execute(
                """
                INSERT INTO boletos (
                    nosso_numero, seu_numero, status, valor_titulo,
                    valor_pago, data_pagamento, status_pre_protesto, versao
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    boleto.nosso_numero,
                    boleto.seu_numero,
                    boleto.status.value,
                    boleto.valor_titulo,
                    boleto.valor_pago,
                    _iso(boleto.data_pagamento),
                    boleto.status_pre_protesto.value if boleto.status_pre_protesto else None,
                    boleto.versao,
                ),
            )
            for evento in boleto.eventos:
                self._inserir_evento(boleto.nosso_numero, evento)

    def buscar_por_nosso_numero(self, nosso_numero):
        with self._lock:
            return self._buscar(nosso_numero)

    def aplicar_atualizacao(self, atualizacao):
        with self._lock:
            atual = self._buscar(atualizacao.nosso_numero)
            if atual is None or atual.versao != atualizacao.versao_esperada:
                return False
            novo = atual.com_atualizacao(atualizacao)
            with self.conn:
                cursor = self.conn.execute(
                    """
                    UPDATE boletos
                       SET status = ?, valor_titulo = ?, valor_pago = ?,
                           data_pagamento = ?, status_pre_protesto = ?,
                           versao = ?
                     WHERE nosso_numero = ? AND versao = ?
                    """,
                    (
                        novo.status.value,
                        novo.valor_titulo,
                        novo.valor_pago,
                        _iso(novo.data_pagamento),
                        novo.status_pre_protesto.value if novo.status_pre_protesto else None,
                        novo.versao,
                        atualizacao.nosso_numero,
                        atualizacao.versao_esperada,
                    ),
                )
                if cursor.rowcount == 0:
                    logger.warning(
                        "Boleto %s alterado por outra gravação durante a atualização.",
                        atualizacao.nosso_numero,
                    )
                    return False
                self._inserir_evento(atualizacao.nosso_numero, atualizacao.evento)
                if atualizacao.transacao is not None:
                    self._inserir_transacao(atualizacao.transacao)
            return True

    def listar_transacoes(self, nosso_numero=None):
        sql = """
            SELECT nosso_numero, codigo_ocorrencia, data_pagamento, valor_pago,
                   valor_liquido, registrada_em, valor_juros, valor_desconto,
                   valor_abatimento, valor_tarifa
              FROM transacoes
        """
        parametros = ()
        if nosso_numero is not None:
            sql += " WHERE nosso_numero = ?"
            parametros = (nosso_numero,)
        with self._lock:
            rows = self.conn.execute(sql + " ORDER BY id", parametros).fetchall()
        return [
            Transacao(
                nosso_numero=row[0],
                codigo_ocorrencia=row[1],
                data_pagamento=_data(row[2]),
                valor_pago=row[3],
                valor_liquido=row[4],
                registrada_em=datetime.fromisoformat(row[5]),
                valor_juros=row[6],
                valor_desconto=row[7],
                valor_abatimento=row[8],
                valor_tarifa=row[9],
            )
            for row in rows
        ]

    def _inserir_transacao(self, transacao: Transacao):
        self.conn.execute(
            """
            INSERT INTO transacoes (
                nosso_numero, codigo_ocorrencia, data_pagamento, valor_pago,
                valor_juros, valor_desconto, valor_abatimento, valor_tarifa,
                valor_liquido, registrada_em
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transacao.nosso_numero,
                transacao.codigo_ocorrencia,
                _iso(transacao.data_pagamento),
                transacao.valor_pago,
                transacao.valor_juros,
                transacao.valor_desconto,
                transacao.valor_abatimento,
                transacao.valor_tarifa,
                transacao.valor_liquido,
                transacao.registrada_em.isoformat(),
            ),
        )

    def _inserir_evento(self, nosso_numero, evento: EventoAplicado):
        self.conn.execute(
            """
            INSERT INTO boleto_eventos (
                nosso_numero, tipo, codigo_ocorrencia, data_efetiva, valor,
                valor_juros, valor_desconto, valor_abatimento, valor_tarifa,
                motivo_rejeicao, posicao_origem, aplicado_em
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                nosso_numero,
                evento.tipo.value,
                evento.codigo_ocorrencia,
                _iso(evento.data_efetiva),
                evento.valor,
                evento.valor_juros,
                evento.valor_desconto,
                evento.valor_abatimento,
                evento.valor_tarifa,
                evento.motivo_rejeicao,
                evento.posicao_origem,
                evento.aplicado_em.isoformat(),
            ),
        )

    def _buscar(self, nosso_numero):
        row = self.conn.execute(
            """
            SELECT nosso_numero, seu_numero, status, valor_titulo, valor_pago,
                   data_pagamento, status_pre_protesto, versao
              FROM boletos
             WHERE nosso_numero = ?
            """,
            (nosso_numero,),
        ).fetchone()
        if row is None:
            return None

        eventos = tuple(
            EventoAplicado(
                tipo=TipoEvento(ev[0]),
                codigo_ocorrencia=ev[1],
                data_efetiva=_data(ev[2]),
                valor=ev[3],
                valor_juros=ev[4],
                valor_desconto=ev[5],
                valor_abatimento=ev[6],
                valor_tarifa=ev[7],
                motivo_rejeicao=ev[8],
                posicao_origem=ev[9],
                aplicado_em=datetime.fromisoformat(ev[10]),
            )
            for ev in self.conn.execute(
                """
                SELECT tipo, codigo_ocorrencia, data_efetiva, valor, valor_juros,
                       valor_desconto, valor_abatimento, valor_tarifa,
                       motivo_rejeicao, posicao_origem, aplicado_em
                  FROM boleto_eventos
                 WHERE nosso_numero = ?
                 ORDER BY id
                """,
                (nosso_numero,),
            )
        )
        return Boleto(
            nosso_numero=row[0],
            seu_numero=row[1],
            status=StatusBoleto(row[2]),
            valor_titulo=row[3],
            valor_pago=row[4],
            data_pagamento=_data(row[5]),
            status_pre_protesto=_status(row[6]),
            versao=row[7],
            eventos=eventos,
        )
