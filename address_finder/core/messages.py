"""User-facing text, keyed by locale and message key.

Everything locale-specific lives here: error messages, the clipboard and
share templates, the labels the generative service is asked to emit, and
the prompt that asks for them.
"""

from __future__ import annotations

from typing import Dict

DEFAULT_LOCALE = "fa"

MESSAGES: Dict[str, Dict[str, str]] = {
    "fa": {
        "permission_denied": (
            "دسترسی به موقعیت مکانی رد شد. لطفاً در تنظیمات مرورگر اجازه دسترسی را فعال کنید."
        ),
        "location_unavailable": (
            "موقعیت مکانی در دسترس نیست. لطفاً GPS دستگاه را روشن کنید و دوباره تلاش کنید."
        ),
        "upstream_error": "دریافت آدرس از سرویس‌ها ممکن نشد. لطفاً دوباره تلاش کنید.",
        "unexpected": "خطای غیرمنتظره در دریافت موقعیت رخ داد.",
        "summary": (
            "📍 موقعیت من:\n"
            "🏠 آدرس: {full_address}\n"
            "📮 کد پستی: {postcode}\n"
            "🌐 مختصات: {latitude}, {longitude}"
        ),
        "postcode_unknown": "نامشخص",
        "share_title": "موقعیت مکانی دقیق من",
        "share_text": "آدرس: {full_address}\nکد پستی: {postcode}",
        "prompt": (
            "به عنوان یک مامور پست دقیق، آدرس پستی کامل و دقیق مربوط به این مختصات را پیدا کن:\n"
            "عرض جغرافیایی: {latitude}\n"
            "طول جغرافیایی: {longitude}\n"
            "\n"
            "لطفاً اطلاعات زیر را با جستجوی دقیق استخراج کن:\n"
            "1. استان و شهر\n"
            "2. منطقه شهرداری یا بخش (District)\n"
            "3. نام محله یا شهرک\n"
            "4. نام خیابان اصلی و فرعی\n"
            "5. نام ساختمان، پلاک یا واحد (در صورت امکان)\n"
            "6. کد پستی ۱۰ رقمی (بسیار مهم)\n"
            "\n"
            "پاسخ را دقیقاً در قالب این برچسب‌ها برگردان (هر مورد در یک خط):\n"
            "{label_lines}"
        ),
        "separator": "، ",
    },
    "en": {
        "permission_denied": (
            "Location access was denied. Please allow location access in your browser settings."
        ),
        "location_unavailable": (
            "Location is unavailable. Please turn on the device GPS and try again."
        ),
        "upstream_error": "Could not get an address from the address services. Please try again.",
        "unexpected": "An unexpected error occurred while getting your location.",
        "summary": (
            "📍 My location:\n"
            "🏠 Address: {full_address}\n"
            "📮 Postcode: {postcode}\n"
            "🌐 Coordinates: {latitude}, {longitude}"
        ),
        "postcode_unknown": "unknown",
        "share_title": "My exact location",
        "share_text": "Address: {full_address}\nPostcode: {postcode}",
        "prompt": (
            "Acting as a meticulous postal worker, find the complete and exact postal address "
            "for these coordinates:\n"
            "Latitude: {latitude}\n"
            "Longitude: {longitude}\n"
            "\n"
            "Search carefully for the state and city, the municipal district, the neighbourhood, "
            "the main and side streets, the building or plate number where possible, "
            "and the postcode.\n"
            "\n"
            "Return the answer using exactly these labels, one per line:\n"
            "{label_lines}"
        ),
        "separator": ", ",
    },
}

# Order matters: it is the order the labels are listed in the prompt.
FIELD_LABELS: Dict[str, Dict[str, str]] = {
    "fa": {
        "state": "استان",
        "city": "شهر",
        "district": "منطقه",
        "neighbourhood": "محله",
        "road": "خیابان",
        "building": "پلاک/ساختمان",
        "postcode": "کدپستی",
        "full_address": "آدرس کامل",
    },
    "en": {
        "state": "State",
        "city": "City",
        "district": "District",
        "neighbourhood": "Neighbourhood",
        "road": "Street",
        "building": "Building",
        "postcode": "Postcode",
        "full_address": "Full address",
    },
}

_LABEL_PLACEHOLDERS: Dict[str, Dict[str, str]] = {
    "fa": {
        "state": "[نام استان]",
        "city": "[نام شهر]",
        "district": "[منطقه شهرداری]",
        "neighbourhood": "[نام محله]",
        "road": "[نام خیابان‌ها]",
        "building": "[جزئیات]",
        "postcode": "[کد پستی]",
        "full_address": "[آدرس روان و رسمی]",
    },
    "en": {
        "state": "[state name]",
        "city": "[city name]",
        "district": "[municipal district]",
        "neighbourhood": "[neighbourhood name]",
        "road": "[street names]",
        "building": "[details]",
        "postcode": "[postcode]",
        "full_address": "[fluent, formal address]",
    },
}


def resolve_locale(locale: str | None) -> str:
    """Return *locale* if it has a table, otherwise the default locale."""
    if locale and locale in MESSAGES:
        return locale
    return DEFAULT_LOCALE


def get_message(key: str, locale: str | None = None) -> str:
    table = MESSAGES[resolve_locale(locale)]
    return table.get(key) or MESSAGES[DEFAULT_LOCALE][key]


def field_labels(locale: str | None = None) -> Dict[str, str]:
    return dict(FIELD_LABELS[resolve_locale(locale)])


def separator(locale: str | None = None) -> str:
    return get_message("separator", locale)


def build_prompt(latitude: float, longitude: float, locale: str | None = None) -> str:
    """Render the grounding prompt, listing every label the parser looks for."""
    loc = resolve_locale(locale)
    placeholders = _LABEL_PLACEHOLDERS[loc]
    label_lines = "\n".join(
        f"{label}: {placeholders[field]}" for field, label in FIELD_LABELS[loc].items()
    )
    return get_message("prompt", loc).format(
        latitude=latitude,
        longitude=longitude,
        label_lines=label_lines,
    )
