from lifeledger.services.receipts.compressor import (
    CompressedReceipt,
    ReceiptCompressionError,
    ReceiptCompressor,
    ReceiptTooLargeError,
    UnreadableReceiptError,
    decode_receipt,
)

__all__ = [
    "CompressedReceipt",
    "ReceiptCompressionError",
    "ReceiptCompressor",
    "ReceiptTooLargeError",
    "UnreadableReceiptError",
    "decode_receipt",
]
