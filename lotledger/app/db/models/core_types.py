import enum


class LotPolicy(str, enum.Enum):
    fifo = "FIFO"
    lifo = "LIFO"


class LotSource(str, enum.Enum):
    explicit = "EXPLICIT"
    policy = "POLICY"
