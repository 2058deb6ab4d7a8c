from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from models.dating_profiles import LOOKING_FOR_OPTIONS
from utils.errors import ValidationError

MIN_AGE = 18
MAX_AGE = 120
MAX_DISPLAY_NAME = 100
MAX_BIO = 1000
MAX_INTERESTS = 20

# Cents columns are 32-bit integers
MAX_AMOUNT_CENTS = 2**31 - 1

PROFILE_FIELDS = (
    'display_name', 'age', 'bio', 'interests', 'photo_url',
    'institution', 'course', 'looking_for',
)


def parse_interests(value: Any) -> Optional[List[str]]:
    """Accept a list or a comma separated string; drop blanks."""
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ValidationError("interests must be a list or a comma separated string")

    interests = [str(item).strip() for item in items if str(item).strip()]
    if len(interests) > MAX_INTERESTS:
        raise ValidationError(f"At most {MAX_INTERESTS} interests are allowed")
    return interests or None


def parse_age(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("age must be a whole number")
    try:
        age = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("age must be a whole number")
    if age < MIN_AGE or age > MAX_AGE:
        raise ValidationError(f"age must be between {MIN_AGE} and {MAX_AGE}")
    return age


def validate_dating_profile(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate a dating profile payload and return the cleaned fields.

    Args:
        data: Request JSON
        partial: When True only the keys present are checked (PATCH)

    Returns:
        Dict of cleaned values keyed by model attribute

    Raises:
        ValidationError: On the first invalid field
    """
    if not isinstance(data, dict):
        raise ValidationError("No data provided")

    cleaned = {}

    if not partial or 'display_name' in data:
        display_name = (data.get('display_name') or '').strip()
        if not display_name:
            raise ValidationError("display_name is required")
        if len(display_name) > MAX_DISPLAY_NAME:
            raise ValidationError(f"display_name must be at most {MAX_DISPLAY_NAME} characters")
        cleaned['display_name'] = display_name

    if not partial or 'age' in data:
        if data.get('age') in (None, ''):
            raise ValidationError("age is required")
        cleaned['age'] = parse_age(data['age'])

    if 'bio' in data:
        bio = (data.get('bio') or '').strip()
        if len(bio) > MAX_BIO:
            raise ValidationError(f"bio must be at most {MAX_BIO} characters")
        cleaned['bio'] = bio or None

    if 'interests' in data:
        cleaned['interests'] = parse_interests(data.get('interests'))

    if 'looking_for' in data or not partial:
        looking_for = data.get('looking_for') or 'friendship'
        if looking_for not in LOOKING_FOR_OPTIONS:
            raise ValidationError(
                "Invalid looking_for value",
                {'allowed': list(LOOKING_FOR_OPTIONS)}
            )
        cleaned['looking_for'] = looking_for

    for field in ('photo_url', 'institution', 'course'):
        if field in data:
            cleaned[field] = (data.get(field) or '').strip() or None

    return cleaned


def parse_amount(value: Any) -> int:
    """
    Convert a rand amount (number or numeric string) to integer cents.

    Raises:
        ValidationError: If the amount is missing, not a number, has more
            than two decimals, is not positive or is too large to store
    """
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Please enter an amount")

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError("Please enter a valid amount")

    if not amount.is_finite():
        raise ValidationError("Please enter a valid amount")
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    if amount.as_tuple().exponent < -2:
        raise ValidationError("Amount can have at most two decimal places")

    if amount > Decimal(MAX_AMOUNT_CENTS) / 100:
        raise ValidationError(f"Amount cannot exceed R{format_cents(MAX_AMOUNT_CENTS)}")

    return int(amount * 100)


def format_cents(cents: int) -> str:
    """Render cents as a rand string, e.g. 30000 -> '300.00'"""
    sign = '-' if cents < 0 else ''
    cents = abs(cents)
    return f"{sign}{cents // 100}.{cents % 100:02d}"
