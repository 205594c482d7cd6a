"""plog: fire-and-forget messages over UDP.

Messages larger than one datagram are split into chunks. Every chunk travels as
a self-describing multipart packet, so a receiver can put a message back
together from whatever arrives, in any order, without talking back.

Nothing here retries or acknowledges. A send that fails is reported to the
caller and the socket is rebuilt on the next send.
"""

from .client import Client
from .packet import MultipartPacket, PacketDecodeError, PacketEncodeError, decode_multipart, encode_multipart

__all__ = [
    "Client",
    "MultipartPacket",
    "PacketDecodeError",
    "PacketEncodeError",
    "decode_multipart",
    "encode_multipart",
]
