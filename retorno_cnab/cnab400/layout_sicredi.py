"""
Layout do arquivo de retorno CNAB 400 do Sicredi.

Posições 1-based e inclusivas, como no manual do banco. Tipos de campo:

- ``alfa``: texto alinhado à esquerda, completado com brancos
- ``digitos``: identificador numérico, mantido como texto (zeros à esquerda)
- ``numero``: inteiro (quantidades e sequências)
- ``valor``: inteiro em centavos (2 casas decimais implícitas)
- ``data``: DDMMAA
- ``data_aaaammdd``: AAAAMMDD

Intervalos não listados são brancos (uso do banco).
"""

CNAB400_SICREDI_CODIGO_BANCO = "748"

TIPO_HEADER = "0"
TIPO_DETALHE = "1"
TIPO_TRAILER = "9"

LAYOUT_HEADER = {
    "tipo_registro": {"inicio": 1, "fim": 1, "tipo": "alfa", "obrigatorio": True},
    "codigo_retorno": {"inicio": 2, "fim": 2, "tipo": "digitos"},
    "literal_retorno": {"inicio": 3, "fim": 9, "tipo": "alfa"},
    "codigo_servico": {"inicio": 10, "fim": 11, "tipo": "digitos"},
    "literal_servico": {"inicio": 12, "fim": 26, "tipo": "alfa"},
    "codigo_beneficiario": {"inicio": 27, "fim": 31, "tipo": "digitos"},
    "documento_beneficiario": {"inicio": 32, "fim": 45, "tipo": "digitos"},
    "codigo_banco": {"inicio": 77, "fim": 79, "tipo": "digitos"},
    "literal_banco": {"inicio": 80, "fim": 94, "tipo": "alfa"},
    "data_gravacao": {"inicio": 95, "fim": 102, "tipo": "data_aaaammdd"},
    "numero_retorno": {"inicio": 111, "fim": 117, "tipo": "numero"},
    "versao_sistema": {"inicio": 390, "fim": 394, "tipo": "alfa"},
    "sequencia": {"inicio": 395, "fim": 400, "tipo": "numero"},
}

LAYOUT_DETALHE = {
    "tipo_registro": {"inicio": 1, "fim": 1, "tipo": "alfa", "obrigatorio": True},
    "tipo_cobranca": {"inicio": 14, "fim": 14, "tipo": "alfa"},
    "codigo_pagador_cooperativa": {"inicio": 15, "fim": 19, "tipo": "alfa"},
    "codigo_pagador_associado": {"inicio": 20, "fim": 24, "tipo": "alfa"},
    "boleto_dda": {"inicio": 25, "fim": 25, "tipo": "alfa"},
    "documento_pagador": {"inicio": 26, "fim": 39, "tipo": "digitos"},
    "nosso_numero": {"inicio": 48, "fim": 62, "tipo": "alfa", "obrigatorio": True},
    "codigo_ocorrencia": {"inicio": 109, "fim": 110, "tipo": "alfa", "obrigatorio": True},
    "data_ocorrencia": {"inicio": 111, "fim": 116, "tipo": "data"},
    "seu_numero": {"inicio": 117, "fim": 126, "tipo": "alfa"},
    "data_vencimento": {"inicio": 147, "fim": 152, "tipo": "data"},
    "valor_titulo": {"inicio": 153, "fim": 165, "tipo": "valor"},
    "valor_tarifa": {"inicio": 175, "fim": 187, "tipo": "valor"},
    "valor_abatimento": {"inicio": 241, "fim": 253, "tipo": "valor"},
    "valor_desconto": {"inicio": 254, "fim": 266, "tipo": "valor"},
    "valor_pago": {"inicio": 267, "fim": 279, "tipo": "valor"},
    "valor_juros": {"inicio": 280, "fim": 292, "tipo": "valor"},
    "valor_multa": {"inicio": 293, "fim": 305, "tipo": "valor"},
    "motivos_ocorrencia": {"inicio": 319, "fim": 328, "tipo": "alfa"},
    "data_prevista_credito": {"inicio": 329, "fim": 336, "tipo": "data_aaaammdd"},
    "sequencia": {"inicio": 395, "fim": 400, "tipo": "numero"},
}

LAYOUT_TRAILER = {
    "tipo_registro": {"inicio": 1, "fim": 1, "tipo": "alfa", "obrigatorio": True},
    "codigo_retorno": {"inicio": 2, "fim": 2, "tipo": "digitos"},
    "codigo_banco": {"inicio": 3, "fim": 5, "tipo": "digitos"},
    "codigo_beneficiario": {"inicio": 6, "fim": 10, "tipo": "digitos"},
    "quantidade_titulos": {"inicio": 18, "fim": 25, "tipo": "numero"},
    "valor_total": {"inicio": 26, "fim": 39, "tipo": "valor"},
    "sequencia": {"inicio": 395, "fim": 400, "tipo": "numero"},
}

LAYOUTS_SICREDI = {
    TIPO_HEADER: LAYOUT_HEADER,
    TIPO_DETALHE: LAYOUT_DETALHE,
    TIPO_TRAILER: LAYOUT_TRAILER,
}

# Campos lidos "no bruto" das linhas que não puderam ser decodificadas,
# para que a conferência do envelope ainda consiga contá-las.
CAMPO_SEQUENCIA = LAYOUT_DETALHE["sequencia"]
CAMPO_VALOR_TITULO = LAYOUT_DETALHE["valor_titulo"]
