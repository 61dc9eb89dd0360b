"""Frame builders shared by the test suite."""

IMEI = "012345678901234"

# Envelope bytes never contain the OK/ERROR markers
HEADER = b"\x00\x6a\x00\x00\x00\x00\x04"
TRAILER = b"\r\n\x00\x00\x00\x00\x00"
ACK_HEADER = b"\x00\x0c\x04\x00\x00\x00\x00\x00\x00"
ACK_TRAILER = b"\r\n"

FULL_SENTENCE = (
    f"12 {IMEI} 511 12345 -500 $GPRMC,102030.000,A,0230.000000,N,"
    "00315.000000,W,12.50,181.20,010223,120,08,*45 85 1234 5678 12345"
)
MINIMAL_SENTENCE = (
    f"0 {IMEI} GPRMC,102030,V,0230.0000,S,00315.0000,E,,,010223,*12"
)


def make_frame(sentence: str) -> bytes:
    return HEADER + sentence.encode("ascii") + TRAILER


def make_ack(text: str) -> bytes:
    return ACK_HEADER + text.encode("ascii") + ACK_TRAILER


def make_sentence(
    event: int = 0,
    status: str = "",
    date: str = "010223",
    tail: str = "*12",
) -> str:
    return (
        f"{event} {IMEI} {status} GPRMC,102030,A,0230.0000,N,00315.0000,W,"
        f"1.0,2.0,{date},{tail}"
    )
