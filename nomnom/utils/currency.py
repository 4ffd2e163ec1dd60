"""
Currency configuration for international price display.

Saved restaurants store an ordinal price tier (1-4) plus the currency code
of the place. This module renders that tier as a human-readable label for
the picker prompt and the UI. Mapping a real price onto a tier is done by
the client; the thresholds are only exposed for that purpose.

Locale and country lookups are best-effort defaults for new profiles.
The user can always override the currency in settings.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from nomnom.utils.constants import DEFAULT_CURRENCY


@dataclass(frozen=True)
class CurrencyConfig:
    """
    Display configuration for one currency.

    Attributes:
        code: ISO-4217 style code (e.g. "MYR")
        symbol: Symbol shown next to prices (e.g. "RM")
        name: Human-readable name
        thresholds: Upper bounds of tiers 1-3 in local currency
                    [budget max, moderate max, pricey max]
        labels: Description for each of the four tiers
    """
    code: str
    symbol: str
    name: str
    thresholds: Tuple[int, int, int]
    labels: Tuple[str, str, str, str]


CURRENCIES: Dict[str, CurrencyConfig] = {
    # North America
    "USD": CurrencyConfig("USD", "$", "US Dollar", (10, 25, 50), (
        "Budget (under $10)", "Moderate ($10-25)", "Pricey ($25-50)", "Splurge ($50+)",
    )),
    "CAD": CurrencyConfig("CAD", "C$", "Canadian Dollar", (15, 35, 70), (
        "Budget (under C$15)", "Moderate (C$15-35)", "Pricey (C$35-70)", "Splurge (C$70+)",
    )),
    "MXN": CurrencyConfig("MXN", "MX$", "Mexican Peso", (150, 400, 800), (
        "Budget (under MX$150)", "Moderate (MX$150-400)", "Pricey (MX$400-800)", "Splurge (MX$800+)",
    )),

    # South America
    "BRL": CurrencyConfig("BRL", "R$", "Brazilian Real", (40, 100, 200), (
        "Budget (under R$40)", "Moderate (R$40-100)", "Pricey (R$100-200)", "Splurge (R$200+)",
    )),
    "ARS": CurrencyConfig("ARS", "AR$", "Argentine Peso", (5000, 15000, 30000), (
        "Budget (under AR$5000)", "Moderate (AR$5000-15000)", "Pricey (AR$15000-30000)", "Splurge (AR$30000+)",
    )),
    "CLP": CurrencyConfig("CLP", "CL$", "Chilean Peso", (8000, 20000, 40000), (
        "Budget (under CL$8000)", "Moderate (CL$8000-20000)", "Pricey (CL$20000-40000)", "Splurge (CL$40000+)",
    )),
    "COP": CurrencyConfig("COP", "CO$", "Colombian Peso", (25000, 60000, 120000), (
        "Budget (under CO$25000)", "Moderate (CO$25000-60000)", "Pricey (CO$60000-120000)", "Splurge (CO$120000+)",
    )),
    "PEN": CurrencyConfig("PEN", "S/", "Peruvian Sol", (25, 60, 120), (
        "Budget (under S/25)", "Moderate (S/25-60)", "Pricey (S/60-120)", "Splurge (S/120+)",
    )),

    # Europe
    "EUR": CurrencyConfig("EUR", "€", "Euro", (10, 25, 50), (
        "Budget (under €10)", "Moderate (€10-25)", "Pricey (€25-50)", "Splurge (€50+)",
    )),
    "GBP": CurrencyConfig("GBP", "£", "British Pound", (8, 20, 40), (
        "Budget (under £8)", "Moderate (£8-20)", "Pricey (£20-40)", "Splurge (£40+)",
    )),
    "CHF": CurrencyConfig("CHF", "CHF", "Swiss Franc", (15, 35, 70), (
        "Budget (under CHF15)", "Moderate (CHF15-35)", "Pricey (CHF35-70)", "Splurge (CHF70+)",
    )),
    "SEK": CurrencyConfig("SEK", "kr", "Swedish Krona", (100, 250, 500), (
        "Budget (under 100kr)", "Moderate (100-250kr)", "Pricey (250-500kr)", "Splurge (500kr+)",
    )),
    "NOK": CurrencyConfig("NOK", "kr", "Norwegian Krone", (120, 300, 600), (
        "Budget (under 120kr)", "Moderate (120-300kr)", "Pricey (300-600kr)", "Splurge (600kr+)",
    )),
    "DKK": CurrencyConfig("DKK", "kr", "Danish Krone", (80, 200, 400), (
        "Budget (under 80kr)", "Moderate (80-200kr)", "Pricey (200-400kr)", "Splurge (400kr+)",
    )),
    "PLN": CurrencyConfig("PLN", "zł", "Polish Zloty", (35, 80, 160), (
        "Budget (under 35zł)", "Moderate (35-80zł)", "Pricey (80-160zł)", "Splurge (160zł+)",
    )),
    "CZK": CurrencyConfig("CZK", "Kč", "Czech Koruna", (200, 500, 1000), (
        "Budget (under 200Kč)", "Moderate (200-500Kč)", "Pricey (500-1000Kč)", "Splurge (1000Kč+)",
    )),
    "HUF": CurrencyConfig("HUF", "Ft", "Hungarian Forint", (3000, 8000, 15000), (
        "Budget (under 3000Ft)", "Moderate (3000-8000Ft)", "Pricey (8000-15000Ft)", "Splurge (15000Ft+)",
    )),
    "RON": CurrencyConfig("RON", "lei", "Romanian Leu", (40, 100, 200), (
        "Budget (under 40 lei)", "Moderate (40-100 lei)", "Pricey (100-200 lei)", "Splurge (200 lei+)",
    )),
    "TRY": CurrencyConfig("TRY", "₺", "Turkish Lira", (200, 500, 1000), (
        "Budget (under ₺200)", "Moderate (₺200-500)", "Pricey (₺500-1000)", "Splurge (₺1000+)",
    )),
    "RUB": CurrencyConfig("RUB", "₽", "Russian Ruble", (500, 1500, 3000), (
        "Budget (under ₽500)", "Moderate (₽500-1500)", "Pricey (₽1500-3000)", "Splurge (₽3000+)",
    )),
    "UAH": CurrencyConfig("UAH", "₴", "Ukrainian Hryvnia", (200, 500, 1000), (
        "Budget (under ₴200)", "Moderate (₴200-500)", "Pricey (₴500-1000)", "Splurge (₴1000+)",
    )),

    # Asia
    "MYR": CurrencyConfig("MYR", "RM", "Malaysian Ringgit", (15, 40, 80), (
        "Budget (under RM15)", "Moderate (RM15-40)", "Pricey (RM40-80)", "Splurge (RM80+)",
    )),
    "SGD": CurrencyConfig("SGD", "S$", "Singapore Dollar", (12, 30, 60), (
        "Budget (under S$12)", "Moderate (S$12-30)", "Pricey (S$30-60)", "Splurge (S$60+)",
    )),
    "JPY": CurrencyConfig("JPY", "¥", "Japanese Yen", (1000, 2500, 5000), (
        "Budget (under ¥1000)", "Moderate (¥1000-2500)", "Pricey (¥2500-5000)", "Splurge (¥5000+)",
    )),
    "CNY": CurrencyConfig("CNY", "¥", "Chinese Yuan", (50, 150, 300), (
        "Budget (under ¥50)", "Moderate (¥50-150)", "Pricey (¥150-300)", "Splurge (¥300+)",
    )),
    "HKD": CurrencyConfig("HKD", "HK$", "Hong Kong Dollar", (80, 200, 400), (
        "Budget (under HK$80)", "Moderate (HK$80-200)", "Pricey (HK$200-400)", "Splurge (HK$400+)",
    )),
    "TWD": CurrencyConfig("TWD", "NT$", "Taiwan Dollar", (200, 500, 1000), (
        "Budget (under NT$200)", "Moderate (NT$200-500)", "Pricey (NT$500-1000)", "Splurge (NT$1000+)",
    )),
    "KRW": CurrencyConfig("KRW", "₩", "South Korean Won", (10000, 25000, 50000), (
        "Budget (under ₩10000)", "Moderate (₩10000-25000)", "Pricey (₩25000-50000)", "Splurge (₩50000+)",
    )),
    "THB": CurrencyConfig("THB", "฿", "Thai Baht", (150, 400, 800), (
        "Budget (under ฿150)", "Moderate (฿150-400)", "Pricey (฿400-800)", "Splurge (฿800+)",
    )),
    "VND": CurrencyConfig("VND", "₫", "Vietnamese Dong", (100000, 300000, 600000), (
        "Budget (under ₫100k)", "Moderate (₫100-300k)", "Pricey (₫300-600k)", "Splurge (₫600k+)",
    )),
    "IDR": CurrencyConfig("IDR", "Rp", "Indonesian Rupiah", (50000, 150000, 300000), (
        "Budget (under Rp50k)", "Moderate (Rp50-150k)", "Pricey (Rp150-300k)", "Splurge (Rp300k+)",
    )),
    "PHP": CurrencyConfig("PHP", "₱", "Philippine Peso", (300, 800, 1500), (
        "Budget (under ₱300)", "Moderate (₱300-800)", "Pricey (₱800-1500)", "Splurge (₱1500+)",
    )),
    "INR": CurrencyConfig("INR", "₹", "Indian Rupee", (300, 800, 1500), (
        "Budget (under ₹300)", "Moderate (₹300-800)", "Pricey (₹800-1500)", "Splurge (₹1500+)",
    )),
    "PKR": CurrencyConfig("PKR", "Rs", "Pakistani Rupee", (800, 2000, 4000), (
        "Budget (under Rs800)", "Moderate (Rs800-2000)", "Pricey (Rs2000-4000)", "Splurge (Rs4000+)",
    )),
    "BDT": CurrencyConfig("BDT", "৳", "Bangladeshi Taka", (300, 800, 1500), (
        "Budget (under ৳300)", "Moderate (৳300-800)", "Pricey (৳800-1500)", "Splurge (৳1500+)",
    )),
    "LKR": CurrencyConfig("LKR", "Rs", "Sri Lankan Rupee", (1000, 3000, 6000), (
        "Budget (under Rs1000)", "Moderate (Rs1000-3000)", "Pricey (Rs3000-6000)", "Splurge (Rs6000+)",
    )),
    "NPR": CurrencyConfig("NPR", "Rs", "Nepalese Rupee", (500, 1500, 3000), (
        "Budget (under Rs500)", "Moderate (Rs500-1500)", "Pricey (Rs1500-3000)", "Splurge (Rs3000+)",
    )),
    "MMK": CurrencyConfig("MMK", "K", "Myanmar Kyat", (5000, 15000, 30000), (
        "Budget (under K5000)", "Moderate (K5000-15000)", "Pricey (K15000-30000)", "Splurge (K30000+)",
    )),
    "KHR": CurrencyConfig("KHR", "៛", "Cambodian Riel", (20000, 50000, 100000), (
        "Budget (under ៛20k)", "Moderate (៛20-50k)", "Pricey (៛50-100k)", "Splurge (៛100k+)",
    )),

    # Middle East
    "AED": CurrencyConfig("AED", "د.إ", "UAE Dirham", (40, 100, 200), (
        "Budget (under د.إ40)", "Moderate (د.إ40-100)", "Pricey (د.إ100-200)", "Splurge (د.إ200+)",
    )),
    "SAR": CurrencyConfig("SAR", "﷼", "Saudi Riyal", (40, 100, 200), (
        "Budget (under ﷼40)", "Moderate (﷼40-100)", "Pricey (﷼100-200)", "Splurge (﷼200+)",
    )),
    "QAR": CurrencyConfig("QAR", "ر.ق", "Qatari Riyal", (40, 100, 200), (
        "Budget (under ر.ق40)", "Moderate (ر.ق40-100)", "Pricey (ر.ق100-200)", "Splurge (ر.ق200+)",
    )),
    "KWD": CurrencyConfig("KWD", "د.ك", "Kuwaiti Dinar", (3, 8, 15), (
        "Budget (under د.ك3)", "Moderate (د.ك3-8)", "Pricey (د.ك8-15)", "Splurge (د.ك15+)",
    )),
    "BHD": CurrencyConfig("BHD", "BD", "Bahraini Dinar", (4, 10, 20), (
        "Budget (under BD4)", "Moderate (BD4-10)", "Pricey (BD10-20)", "Splurge (BD20+)",
    )),
    "OMR": CurrencyConfig("OMR", "ر.ع.", "Omani Rial", (4, 10, 20), (
        "Budget (under ر.ع.4)", "Moderate (ر.ع.4-10)", "Pricey (ر.ع.10-20)", "Splurge (ر.ع.20+)",
    )),
    "JOD": CurrencyConfig("JOD", "د.ا", "Jordanian Dinar", (5, 15, 30), (
        "Budget (under د.ا5)", "Moderate (د.ا5-15)", "Pricey (د.ا15-30)", "Splurge (د.ا30+)",
    )),
    "ILS": CurrencyConfig("ILS", "₪", "Israeli Shekel", (40, 100, 200), (
        "Budget (under ₪40)", "Moderate (₪40-100)", "Pricey (₪100-200)", "Splurge (₪200+)",
    )),
    "EGP": CurrencyConfig("EGP", "E£", "Egyptian Pound", (200, 500, 1000), (
        "Budget (under E£200)", "Moderate (E£200-500)", "Pricey (E£500-1000)", "Splurge (E£1000+)",
    )),

    # Africa
    "ZAR": CurrencyConfig("ZAR", "R", "South African Rand", (150, 400, 800), (
        "Budget (under R150)", "Moderate (R150-400)", "Pricey (R400-800)", "Splurge (R800+)",
    )),
    "NGN": CurrencyConfig("NGN", "₦", "Nigerian Naira", (5000, 15000, 30000), (
        "Budget (under ₦5000)", "Moderate (₦5000-15000)", "Pricey (₦15000-30000)", "Splurge (₦30000+)",
    )),
    "KES": CurrencyConfig("KES", "KSh", "Kenyan Shilling", (800, 2000, 4000), (
        "Budget (under KSh800)", "Moderate (KSh800-2000)", "Pricey (KSh2000-4000)", "Splurge (KSh4000+)",
    )),
    "GHS": CurrencyConfig("GHS", "GH₵", "Ghanaian Cedi", (80, 200, 400), (
        "Budget (under GH₵80)", "Moderate (GH₵80-200)", "Pricey (GH₵200-400)", "Splurge (GH₵400+)",
    )),
    "MAD": CurrencyConfig("MAD", "د.م.", "Moroccan Dirham", (80, 200, 400), (
        "Budget (under د.م.80)", "Moderate (د.م.80-200)", "Pricey (د.م.200-400)", "Splurge (د.م.400+)",
    )),
    "TZS": CurrencyConfig("TZS", "TSh", "Tanzanian Shilling", (15000, 40000, 80000), (
        "Budget (under TSh15k)", "Moderate (TSh15-40k)", "Pricey (TSh40-80k)", "Splurge (TSh80k+)",
    )),

    # Oceania
    "AUD": CurrencyConfig("AUD", "A$", "Australian Dollar", (15, 35, 70), (
        "Budget (under A$15)", "Moderate (A$15-35)", "Pricey (A$35-70)", "Splurge (A$70+)",
    )),
    "NZD": CurrencyConfig("NZD", "NZ$", "New Zealand Dollar", (15, 40, 80), (
        "Budget (under NZ$15)", "Moderate (NZ$15-40)", "Pricey (NZ$40-80)", "Splurge (NZ$80+)",
    )),
    "FJD": CurrencyConfig("FJD", "FJ$", "Fijian Dollar", (20, 50, 100), (
        "Budget (under FJ$20)", "Moderate (FJ$20-50)", "Pricey (FJ$50-100)", "Splurge (FJ$100+)",
    )),
}

# Map country codes to default currencies
COUNTRY_TO_CURRENCY: Dict[str, str] = {
    'MY': 'MYR',
    'US': 'USD',
    'GB': 'GBP',
    'AU': 'AUD',
    'SG': 'SGD',
    'JP': 'JPY',
    'IN': 'INR',
    # Eurozone
    'DE': 'EUR', 'FR': 'EUR', 'IT': 'EUR', 'ES': 'EUR', 'NL': 'EUR',
    'BE': 'EUR', 'AT': 'EUR', 'PT': 'EUR', 'IE': 'EUR', 'FI': 'EUR',
}


def get_currency_config(currency_code: Optional[str]) -> CurrencyConfig:
    """Get currency config, falling back to USD for unknown or missing codes."""
    if currency_code and currency_code.upper() in CURRENCIES:
        return CURRENCIES[currency_code.upper()]
    return CURRENCIES[DEFAULT_CURRENCY]


def is_supported_currency(currency_code: Optional[str]) -> bool:
    """Check whether a currency code exists in the display table."""
    return bool(currency_code) and currency_code.upper() in CURRENCIES


def resolve_price_label(tier: Optional[int], currency_code: Optional[str]) -> str:
    """
    Render a 1-4 price tier as a label in the given currency.

    Examples:
        >>> resolve_price_label(2, "USD")
        'Moderate ($10-25)'
        >>> resolve_price_label(1, "MYR")
        'Budget (under RM15)'

    Returns:
        The tier label, or "" when the tier is missing or outside 1-4.
    """
    if tier is None or not 1 <= tier <= 4:
        return ""
    return get_currency_config(currency_code).labels[tier - 1]


def get_price_symbol(tier: Optional[int], currency_code: Optional[str]) -> str:
    """Short form of a tier: the currency symbol repeated tier times ("$$")."""
    if tier is None or not 1 <= tier <= 4:
        return ""
    return get_currency_config(currency_code).symbol * tier


def currency_for_country(country_code: Optional[str]) -> str:
    """Default currency for an ISO-2 country code (USD if unknown)."""
    if not country_code:
        return DEFAULT_CURRENCY
    return COUNTRY_TO_CURRENCY.get(country_code.strip().upper(), DEFAULT_CURRENCY)


def detect_currency(locale: Optional[str]) -> str:
    """
    Guess a currency from a locale such as "en-MY" or "ms_MY".

    Accept-Language header values are tolerated: only the first language
    range is used ("en-GB,en;q=0.9" -> "en-GB").

    Returns:
        Currency code from COUNTRY_TO_CURRENCY, or USD when the locale has
        no region or the region is unknown.
    """
    if not locale:
        return DEFAULT_CURRENCY

    primary = locale.split(",")[0].split(";")[0].strip().replace("_", "-")
    parts = primary.split("-")
    if len(parts) < 2:
        return DEFAULT_CURRENCY

    return currency_for_country(parts[1])


def get_supported_currencies() -> List[CurrencyConfig]:
    """All supported currencies, in table order, for selectors."""
    return list(CURRENCIES.values())
