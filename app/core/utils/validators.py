from phonenumbers import parse, is_valid_number, NumberParseException, format_number, PhoneNumberFormat
from app.core.utils.text_utils import only_digits

BRAZIL_COUNTRY_CODE = "55"


def sanitize_phone(phone: str | None) -> str:
    return only_digits(phone)


def format_phone_number(phone: str) -> str:
    cleaned = sanitize_phone(phone)
    if len(cleaned) == 9:
        return f"{cleaned[:5]}-{cleaned[5:]}"
    if len(cleaned) == 8:
        return f"{cleaned[:4]}-{cleaned[4:]}"
    return cleaned


def format_full_phone(country_code: str, area_code: str, number: str) -> str:
    return f"+{country_code} ({area_code}) {format_phone_number(number)}"


def is_valid_brazilian_area_code(area_code: str) -> bool:
    try:
        code = int(area_code, 10)
    except (TypeError, ValueError):
        return False
    return 11 <= code <= 99


def validate_phone_parts(country_code: str | None, area_code: str | None, number: str | None) -> None:
    if not country_code:
        raise ValueError("Código do país é obrigatório")
    if not area_code or len(area_code) != 2:
        raise ValueError("DDD deve ter 2 dígitos")

    clean_number = sanitize_phone(number)
    if country_code == BRAZIL_COUNTRY_CODE:
        if not is_valid_brazilian_area_code(area_code):
            raise ValueError("DDD inválido (deve estar entre 11 e 99)")
        if len(clean_number) not in (8, 9):
            raise ValueError("Número deve ter 8 ou 9 dígitos")
    elif len(clean_number) < 6:
        raise ValueError("Número muito curto")


def to_e164_or_none(country_code: str, area_code: str, number: str) -> str | None:
    raw = f"+{country_code}{area_code}{sanitize_phone(number)}"
    try:
        num = parse(raw, None)
    except NumberParseException:
        return None
    if not is_valid_number(num):
        return None
    return format_number(num, PhoneNumberFormat.E164)


def sanitize_cpf(cpf: str | None) -> str:
    return only_digits(cpf)


def normalize_cpf(v: str | None) -> str:
    cleaned = sanitize_cpf(v)
    if len(cleaned) != 11:
        raise ValueError("CPF inválido: deve conter 11 dígitos.")
    return cleaned
