from typing import Optional


class IcmpMessage:
    def __init__(self, icmp_type: int, code: int, quoted_dst_port: Optional[int] = None):
        self.type = icmp_type
        self.code = code
        # UDP destination port of the probe quoted in error messages, if any
        self.quoted_dst_port = quoted_dst_port

    def __eq__(self, other):
        if isinstance(other, IcmpMessage):
            return (self.type, self.code, self.quoted_dst_port) == (other.type, other.code, other.quoted_dst_port)
        return NotImplemented

    def __repr__(self):
        return f'IcmpMessage(type={self.type}, code={self.code}, quoted_dst_port={self.quoted_dst_port})'
