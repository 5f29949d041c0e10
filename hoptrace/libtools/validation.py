# validation.py
#


def validate(condition: bool, msg: str):
    """
    Assertion style input validation
    """
    if not condition:
        raise ValueError(msg)


def validate_at_least(value: int, minimum: int, what: str):
    validate(value >= minimum, f'{what} must be at least {minimum} [was {value}]')
