from enum import Enum


class OutcomeKind(Enum):
    SUCCESS = 'success'
    TIMEOUT = 'timeout'
    SEND_ERROR = 'send-error'
    RECEIVE_ERROR = 'receive-error'


class Classification(Enum):
    HOP = 'hop'
    DESTINATION = 'destination'
    NOISE = 'noise'
    UNCLASSIFIED = 'unclassified'

    @property
    def is_answer(self) -> bool:
        """Whether a response of this class names a responding address for the hop"""
        return self is not Classification.NOISE


class OutputChoice(Enum):
    LINES = 'lines'
    TABLE = 'table'

    @classmethod
    def all_keys(cls):
        return [it.name for it in cls]

    @classmethod
    def default(cls):
        return cls.LINES
