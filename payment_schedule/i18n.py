"""English/Japanese labels for statuses, methods, types and UI chrome."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, Mapping, Sequence, Type

from .models import PaymentMethod, PaymentStatus, PaymentType


class Language(Enum):
    EN = "en"
    JA = "ja"


DEFAULT_LANGUAGE = Language.EN

STATUS_LABELS: Dict[Language, Dict[PaymentStatus, str]] = {
    Language.EN: {
        PaymentStatus.UPCOMING: "Upcoming",
        PaymentStatus.PENDING: "Pending",
        PaymentStatus.PAID: "Paid",
        PaymentStatus.OVERDUE: "Overdue",
        PaymentStatus.DEFERRED: "Deferred",
    },
    Language.JA: {
        PaymentStatus.UPCOMING: "予定",
        PaymentStatus.PENDING: "保留中",
        PaymentStatus.PAID: "支払済み",
        PaymentStatus.OVERDUE: "期限切れ",
        PaymentStatus.DEFERRED: "繰延",
    },
}

METHOD_LABELS: Dict[Language, Dict[PaymentMethod, str]] = {
    Language.EN: {
        PaymentMethod.BANK_TRANSFER: "Bank Transfer",
        PaymentMethod.CREDIT_CARD: "Credit Card",
        PaymentMethod.CHECK: "Check",
        PaymentMethod.CASH: "Cash",
        PaymentMethod.OTHER: "Other",
    },
    Language.JA: {
        PaymentMethod.BANK_TRANSFER: "銀行振込",
        PaymentMethod.CREDIT_CARD: "クレジットカード",
        PaymentMethod.CHECK: "小切手",
        PaymentMethod.CASH: "現金",
        PaymentMethod.OTHER: "その他",
    },
}

TYPE_LABELS: Dict[Language, Dict[PaymentType, str]] = {
    Language.EN: {
        PaymentType.ONE_TIME: "One-time",
        PaymentType.DAILY: "Daily",
        PaymentType.WEEKLY: "Weekly",
        PaymentType.MONTHLY: "Monthly",
    },
    Language.JA: {
        PaymentType.ONE_TIME: "一回限り",
        PaymentType.DAILY: "毎日",
        PaymentType.WEEKLY: "毎週",
        PaymentType.MONTHLY: "毎月",
    },
}

MESSAGES: Dict[Language, Dict[str, str]] = {
    Language.EN: {
        "title": "Payment Schedule Tracker",
        "overview": "Financial Overview",
        "weekly_total": "Weekly Total",
        "monthly_total": "Monthly Total",
        "pending_payments": "Pending Payments",
        "overdue_payments": "Overdue Payments",
        "upcoming_payments": "Upcoming Payments",
        "deferred_payments": "Deferred Payments",
        "deferred_count": "Deferred Count",
        "calendar_view": "Calendar View",
        "table_view": "Table View",
        "trash_view": "Deleted Payments",
        "payee": "Payee",
        "amount": "Amount",
        "due_date": "Due Date",
        "status": "Status",
        "method": "Method",
        "type": "Type",
        "notes": "Notes",
        "document": "Attached File",
        "deleted_date": "Deleted Date",
        "original_due": "Originally Due",
        "planned_for": "Planned For",
        "deferred_reason": "Reason",
        "daily_total": "Daily Total",
        "more": "more",
        "no_payments": "No payments found",
        "no_deferred_payments": "No deferred payments",
        "no_deleted_payments": "No deleted payments",
        "unsupported_format": "Unsupported file format",
        "file_too_large": "File size too large (max 5MB)",
    },
    Language.JA: {
        "title": "支払いスケジュール管理",
        "overview": "財務概要",
        "weekly_total": "週間合計",
        "monthly_total": "月間合計",
        "pending_payments": "保留中の支払い",
        "overdue_payments": "期限切れの支払い",
        "upcoming_payments": "今後の支払い",
        "deferred_payments": "繰延支払",
        "deferred_count": "繰延数",
        "calendar_view": "カレンダー表示",
        "table_view": "テーブル表示",
        "trash_view": "削除済み支払い",
        "payee": "支払先",
        "amount": "金額",
        "due_date": "期日",
        "status": "ステータス",
        "method": "方法",
        "type": "支払いタイプ",
        "notes": "備考",
        "document": "添付ファイル",
        "deleted_date": "削除日",
        "original_due": "当初期日",
        "planned_for": "計画",
        "deferred_reason": "理由",
        "daily_total": "日次合計",
        "more": "件",
        "no_payments": "該当する支払いが見つかりません",
        "no_deferred_payments": "延期された支払いはありません",
        "no_deleted_payments": "削除済み支払いはありません",
        "unsupported_format": "サポートされていないファイル形式です",
        "file_too_large": "ファイルサイズが大きすぎます（最大5MB）",
    },
}

MONTH_NAMES: Dict[Language, Sequence[str]] = {
    Language.EN: (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    Language.JA: tuple(f"{month}月" for month in range(1, 13)),
}

DAY_NAMES: Dict[Language, Sequence[str]] = {
    Language.EN: ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
    Language.JA: ("日", "月", "火", "水", "木", "金", "土"),
}


def _check_exhaustive(name: str, table: Mapping[Language, Mapping], enum_cls: Type[Enum]) -> None:
    for language in Language:
        missing = set(enum_cls) - set(table.get(language, {}))
        if missing:
            labels = ", ".join(sorted(member.value for member in missing))
            raise RuntimeError(f"{name} for {language.value} is missing: {labels}")


_check_exhaustive("STATUS_LABELS", STATUS_LABELS, PaymentStatus)
_check_exhaustive("METHOD_LABELS", METHOD_LABELS, PaymentMethod)
_check_exhaustive("TYPE_LABELS", TYPE_LABELS, PaymentType)
if set(MESSAGES[Language.EN]) != set(MESSAGES[Language.JA]):
    raise RuntimeError("MESSAGES keys differ between languages")


def get_language(value: "Language | str | None") -> Language:
    if value is None:
        return DEFAULT_LANGUAGE
    if isinstance(value, Language):
        return value
    return Language(str(value).strip().lower())


def status_label(status: PaymentStatus, language: "Language | str" = DEFAULT_LANGUAGE) -> str:
    return STATUS_LABELS[get_language(language)][status]


def method_label(method: PaymentMethod, language: "Language | str" = DEFAULT_LANGUAGE) -> str:
    return METHOD_LABELS[get_language(language)][method]


def type_label(payment_type: PaymentType, language: "Language | str" = DEFAULT_LANGUAGE) -> str:
    return TYPE_LABELS[get_language(language)][payment_type]


def text(language: "Language | str", key: str) -> str:
    return MESSAGES[get_language(language)][key]


def month_name(month: int, language: "Language | str" = DEFAULT_LANGUAGE) -> str:
    return MONTH_NAMES[get_language(language)][month - 1]


def day_names(language: "Language | str" = DEFAULT_LANGUAGE) -> Sequence[str]:
    return DAY_NAMES[get_language(language)]


def format_date(value: date, language: "Language | str" = DEFAULT_LANGUAGE) -> str:
    """``January 20, 2024`` in English, ``2024年1月20日`` in Japanese."""

    if get_language(language) is Language.JA:
        return f"{value.year}年{value.month}月{value.day}日"
    return f"{month_name(value.month, Language.EN)} {value.day}, {value.year}"


def month_title(year: int, month: int, language: "Language | str" = DEFAULT_LANGUAGE) -> str:
    if get_language(language) is Language.JA:
        return f"{year}年{month}月"
    return f"{month_name(month, Language.EN)} {year}"
