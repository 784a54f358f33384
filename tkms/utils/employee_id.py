"""
Employee ID generation, e.g. 'ibay-0427'
"""
import secrets
from datetime import date
from typing import Optional


def generate_employee_id(
    prefix: str = "ibay",
    padding: int = 4,
    delimiter: str = "-",
    uppercase: bool = False,
) -> str:
    """Prefix, delimiter and a random zero-padded number of `padding` digits"""
    number = str(secrets.randbelow(10 ** padding)).zfill(padding)
    employee_id = f"{prefix}{delimiter}{number}"
    return employee_id.upper() if uppercase else employee_id


def calculate_age(birthday: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    age = today.year - birthday.year
    if (today.month, today.day) < (birthday.month, birthday.day):
        age -= 1
    return age
