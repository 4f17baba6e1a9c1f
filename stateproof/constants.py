"""
State Proof Wire Constants

Type tags, markers, sizes and limits shared by the signature-file and
record-file decoders. All multi-byte integers on the wire are big endian.
"""

# Primitive sizes
BYTE_SIZE = 1
INT_SIZE = 4
LONG_SIZE = 8

# SHA-384 with RSA signature scheme
SHA384_LENGTH = 48
SHA384_WITH_RSA_TYPE = 1
SHA384_WITH_RSA_MAX_LENGTH = 384
SIGNATURE_LENGTH_FIELD_SIZE = BYTE_SIZE

# Signature file versions (leading byte of the file)
SIGNATURE_FILE_FORMAT_V2 = 4
SIGNATURE_FILE_FORMAT_V5 = 5

# Delimiter between hash and signature in a V2 signature file
SIGNATURE_FILE_V2_MARKER = 3

# Record files
RECORD_FILE_FORMAT_V5 = 5
MAX_RECORD_TRANSACTIONS = 100_000
NANOS_PER_SECOND = 1_000_000_000
