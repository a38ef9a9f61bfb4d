"""Constantes criptográficas para WhatsApp Flows."""

AES_KEY_SIZES_ALLOWED = (16, 24, 32)  # 128/192/256 bits
AES_BLOCK_SIZE = 16  # bytes
TAG_SIZE = 16  # 128 bits, anexada ao final do payload GCM

# Nome do modo AES por tamanho de chave
AES_VARIANT_BITS = {16: 128, 24: 192, 32: 256}
