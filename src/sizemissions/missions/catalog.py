"""Mission catalog: immutable definitions for every mission the engine knows.

The catalog is reference data: it is built once at import time, never mutated
by request handling, and pushed into the `missions` / `mission_translations`
tables by `seed_missions()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

MISSION_CATEGORIES: frozenset[str] = frozenset({"core", "seasonal", "referral", "team", "streak"})


@dataclass(frozen=True)
class Season:
    """Month window, inclusive on both ends. Wraps around the new year when start > end."""

    start_month: int
    end_month: int

    def __post_init__(self) -> None:
        for month in (self.start_month, self.end_month):
            if not 1 <= month <= 12:
                raise ValueError(f"Season month out of range: {month}")

    def contains(self, month: int) -> bool:
        if self.start_month <= self.end_month:
            return self.start_month <= month <= self.end_month
        return month >= self.start_month or month <= self.end_month


@dataclass(frozen=True)
class MissionRules:
    """Descriptive rule metadata. Consumed by evaluators and the UI, never executed generically."""

    triggers: tuple[str, ...] = ()
    criterion: str = ""
    progress: str = ""
    validation: tuple[str, ...] = ()
    timeframe: str | None = None
    notes: tuple[str, ...] = ()
    anti_cheat: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "triggers": list(self.triggers),
            "criterion": self.criterion,
            "progress": self.progress,
            "validation": list(self.validation),
            "antiCheat": list(self.anti_cheat),
        }
        if self.timeframe:
            data["timeframe"] = self.timeframe
        if self.notes:
            data["notes"] = list(self.notes)
        return data


@dataclass(frozen=True)
class MissionRewards:
    xp: int = 0
    badges: tuple[str, ...] = ()
    unlocks: tuple[str, ...] = ()
    premium_days: int | None = None
    freeze_tokens: int | None = None
    boosters: tuple[tuple[str, str], ...] = ()
    extras: tuple[str, ...] = ()

    def snapshot(self) -> dict[str, Any]:
        """JSON payload stored on the mission row and copied into the reward ledger."""
        data: dict[str, Any] = {"xp": self.xp}
        if self.badges:
            data["badges"] = list(self.badges)
        if self.unlocks:
            data["unlocks"] = list(self.unlocks)
        if self.premium_days is not None:
            data["premiumDays"] = self.premium_days
        if self.freeze_tokens is not None:
            data["freezeTokens"] = self.freeze_tokens
        if self.boosters:
            data["boosters"] = [{"type": kind, "value": value} for kind, value in self.boosters]
        if self.extras:
            data["extras"] = list(self.extras)
        return data


@dataclass(frozen=True)
class MissionText:
    title: str
    summary: str
    reward_short: str
    cta_label: str | None = None


@dataclass(frozen=True)
class MissionDefinition:
    code: str
    category: str
    difficulty: str
    repeatable: bool
    cooldown_days: int
    rules: MissionRules
    rewards: MissionRewards
    translations: Mapping[str, MissionText]
    season: Season | None = None
    repeatability: str | None = None
    reward_summary: str = ""
    requirements_summary: str = ""
    display_order: int = 0
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.category not in MISSION_CATEGORIES:
            raise ValueError(f"Unknown mission category for {self.code}: {self.category}")
        if self.cooldown_days < 0:
            raise ValueError(f"Negative cooldown for {self.code}")

    def metadata_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "rewardSummary": self.reward_summary,
            "requirementsSummary": self.requirements_summary,
        }
        if self.repeatability:
            data["repeatability"] = self.repeatability
        return data


# ---------------------------------------------------------------------------
# Catalog data
# ---------------------------------------------------------------------------

_CATALOG_DATA: list[dict[str, Any]] = [
    {
        "code": "ROZRUCH_7_7",
        "category": "core",
        "difficulty": "medium",
        "repeatable": False,
        "cooldown_days": 0,
        "triggers": ["ITEM_CREATED"],
        "criterion": "Add at least one new item every day for 7 consecutive days.",
        "progress": "Streak day counter (0-7), reset after a day without activity.",
        "validation": ["Each item needs >=3 key fields or 1 critical field for its type."],
        "timeframe": "7 consecutive days.",
        "anti_cheat": ["Deduplicate entries within a 24h window.", "Filter dummy values without real data."],
        "rewards": {"xp": 100, "badges": ["ROZGRZANY"]},
        "repeatability": "Once per account.",
        "reward_summary": "100 XP + “Warmed Up” badge",
        "requirements_summary": "At least 1 complete item per day for 7 days.",
        "translations": {
            "pl": ("Rozruch 7/7", "Dodawaj nowe elementy codziennie przez tydzień, aby rozgrzać swoją garderobę.",
                   "+100 XP • Odznaka „Rozgrzany”", "Rozpocznij serię"),
            "en": ("Kick-off 7/7", "Add at least one new item every day for seven days to build the habit.",
                   "+100 XP • “Warmed Up” badge", "Start streak"),
        },
    },
    {
        "code": "SIX_PILLARS",
        "category": "core",
        "difficulty": "hard",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["ITEM_CREATED"],
        "criterion": "Add at least one entry in each of the 6 key categories.",
        "progress": "Per-category checklist: outerwear, tops, bottoms, headwear, accessories, footwear.",
        "validation": ["Each entry matches the mandatory field schema of its category."],
        "anti_cheat": ["Verify field completeness against the category schema."],
        "rewards": {"xp": 150, "unlocks": ["theme_unlock"]},
        "repeatability": "Every 90 days.",
        "reward_summary": "150 XP + theme unlock",
        "requirements_summary": "1 complete entry in each of 6 categories.",
        "translations": {
            "pl": ("Sześć Filarów", "Uzupełnij wszystkie kategorie, by odblokować pełen obraz garderoby.",
                   "+150 XP • Nowy motyw", "Wypełnij kategorie"),
            "en": ("Six Pillars", "Log at least one item in each of the six wardrobe pillars.",
                   "+150 XP • Theme unlock", "Complete pillars"),
        },
    },
    {
        "code": "CLOSET_100",
        "category": "core",
        "difficulty": "hard",
        "repeatable": True,
        "cooldown_days": 365,
        "triggers": ["ITEM_CREATED", "PROFILE_UPDATED"],
        "criterion": "Fill every garment type marked as “I wear” in the profile.",
        "progress": "Done / required counter based on the types active when the mission started.",
        "validation": ["Freeze the “I wear” list after start (snapshot)."],
        "notes": ["The “I wear” list may change at most once a month."],
        "anti_cheat": ["Snapshot the type list at start.", "Monitor changes to the “I wear” list."],
        "rewards": {"xp": 200, "premium_days": 7},
        "repeatability": "Once a year.",
        "reward_summary": "200 XP + 7 days Premium",
        "requirements_summary": "Every declared garment type filled in.",
        "translations": {
            "pl": ("Szafa 100%", "Uzupełnij wszystkie typy, które deklarujesz, że nosisz.",
                   "+200 XP • 7 dni Premium", "Dokończ profil"),
            "en": ("Closet 100%", "Complete every garment type you marked as “I wear”.",
                   "+200 XP • 7 days Premium", "Complete profile"),
        },
    },
    {
        "code": "GOLDEN_WAIST",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["ITEM_CREATED", "ITEM_UPDATED"],
        "criterion": "Record the waist measurement for every bottoms type.",
        "progress": "Checklist of bottoms types: jeans, chinos, suit trousers and so on.",
        "validation": ["No 0 / — / n/a values."],
        "rewards": {"xp": 75, "badges": ["TAILORED_FRAME"]},
        "repeatability": "Every 90 days.",
        "reward_summary": "75 XP + “Tailored” frame",
        "requirements_summary": "Waist size on every bottoms type.",
        "translations": {
            "pl": ("Złota Talia", "Uzbrój każdy typ spodni w dokładny wymiar talii.",
                   "+75 XP • Ramka „Tailored”", None),
            "en": ("Golden Waistline", "Record the waist measurement for every bottoms type.",
                   "+75 XP • “Tailored” frame", None),
        },
    },
    {
        "code": "CHEST_MASTER",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["ITEM_CREATED", "ITEM_UPDATED"],
        "criterion": "Provide the chest measurement for at least 5 different tops subtypes.",
        "progress": "Set of unique subtypes that satisfy the requirement.",
        "validation": ["Each entry must come from a different subtype."],
        "rewards": {"xp": 75},
        "repeatability": "Every 90 days.",
        "reward_summary": "75 XP",
        "requirements_summary": "Chest size in 5 tops subtypes.",
        "translations": {
            "pl": ("Mistrz Klatki", "Zmierz klatkę w pięciu różnych typach ubrań górnych.", "+75 XP", None),
            "en": ("Chest Master", "Log chest measurements for five distinct tops subtypes.", "+75 XP", None),
        },
    },
    {
        "code": "STEP_INTO_BOOTS",
        "category": "seasonal",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 365,
        "season": (11, 2),
        "triggers": ["ITEM_CREATED", "ITEM_UPDATED"],
        "criterion": "For boots: shoe size + insole length + calf circumference.",
        "progress": "Field completeness checklist for the boot footwear type.",
        "validation": ["Ranges: insole 20-35 cm, calf 28-50 cm."],
        "rewards": {"xp": 80},
        "repeatability": "Once per season.",
        "reward_summary": "80 XP",
        "requirements_summary": "Complete boot sizing between November and February.",
        "translations": {
            "pl": ("Krok w Kozaki", "Przygotuj kozakową metryczkę: rozmiar, wkładka i obwód łydki.", "+80 XP", None),
            "en": ("Step into Boots", "Capture size, insole and calf circumference for your boots.", "+80 XP", None),
        },
    },
    {
        "code": "RING_SNIPER",
        "category": "core",
        "difficulty": "easy",
        "repeatable": True,
        "cooldown_days": 180,
        "triggers": ["ITEM_CREATED", "ITEM_UPDATED"],
        "criterion": "Record the ring size for three different fingers.",
        "progress": "Finger counter.",
        "validation": ["Each finger unique."],
        "rewards": {"xp": 60, "badges": ["RING_STICKER"]},
        "repeatability": "Every 180 days.",
        "reward_summary": "60 XP + sticker",
        "requirements_summary": "Ring size for 3 fingers.",
        "translations": {
            "pl": ("Palec w Punkt", "Zabezpiecz rozmiar pierścionka dla trzech palców.", "+60 XP • Naklejka", None),
            "en": ("Ring Precision", "Store the ring size for three different fingers.", "+60 XP • Sticker", None),
        },
    },
    {
        "code": "WRIST_PRO",
        "category": "core",
        "difficulty": "easy",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["ITEM_CREATED", "ITEM_UPDATED"],
        "criterion": "Wrist circumference + bracelet length or watch strap width.",
        "progress": "Field completeness check.",
        "validation": ["Units in cm/mm."],
        "rewards": {"xp": 70},
        "repeatability": "Every 90 days.",
        "reward_summary": "70 XP",
        "requirements_summary": "Wrist size plus one jewellery spec.",
        "translations": {
            "pl": ("Nadgarstek Pro", "Dokładnie zmierz nadgarstek oraz ulubioną biżuterię.", "+70 XP", None),
            "en": ("Wrist Pro", "Measure wrist circumference plus a watch or bracelet spec.", "+70 XP", None),
        },
    },
    {
        "code": "BIKINI_BALANCE",
        "category": "seasonal",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 365,
        "season": (4, 8),
        "triggers": ["ITEM_CREATED"],
        "criterion": "Add a bikini (top + bottom) together with a cut preference.",
        "progress": "Complete pair + preference.",
        "validation": ["Top and bottom added within 7 days."],
        "rewards": {"xp": 80, "extras": ["summer_card"]},
        "repeatability": "Once per season.",
        "reward_summary": "80 XP + “Summer” card",
        "requirements_summary": "Bikini top and bottom with cut preference.",
        "translations": {
            "pl": ("Bikini Balance", "Zadbaj o dopasowanie bikini z pełnymi preferencjami kroju.",
                   "+80 XP • Karta „Lato”", None),
            "en": ("Bikini Balance", "Log top & bottom sizes plus cut preference.", "+80 XP • “Summer” card", None),
        },
    },
    {
        "code": "SUIT_UP",
        "category": "core",
        "difficulty": "hard",
        "repeatable": True,
        "cooldown_days": 365,
        "triggers": ["ITEM_CREATED", "ITEM_UPDATED"],
        "criterion": "Jacket: shoulders, chest, sleeve + trousers: waist, hips, inseam.",
        "progress": "2 parts of the suit set.",
        "validation": ["All fields of both parts must be complete."],
        "rewards": {"xp": 120, "unlocks": ["sets_feature"]},
        "repeatability": "Once a year.",
        "reward_summary": "120 XP + “Sets” unlock",
        "requirements_summary": "Full jacket and trousers measurements.",
        "translations": {
            "pl": ("Suit-Up!", "Skrojony garnitur wymaga pełnych danych marynarki i spodni.",
                   "+120 XP • Odblokowanie „Zestawy”", None),
            "en": ("Suit Up!", "Record the full suit measurements to unlock outfit sets.",
                   "+120 XP • Unlock “Sets”", None),
        },
    },
    {
        "code": "TRACKSUIT_DUO",
        "category": "core",
        "difficulty": "easy",
        "repeatable": True,
        "cooldown_days": 180,
        "triggers": ["ITEM_CREATED"],
        "criterion": "Add a tracksuit set (top + bottom) as one linked set entry.",
        "progress": "1 set.",
        "validation": ["Two separate unlinked entries do not count."],
        "rewards": {"xp": 60},
        "repeatability": "Every 180 days.",
        "reward_summary": "60 XP",
        "requirements_summary": "One linked tracksuit set.",
        "translations": {
            "pl": ("Dresowy Duet", "Zaloguj kompletny zestaw dresowy jako jedną pozycję.", "+60 XP", None),
            "en": ("Tracksuit Duo", "Capture a tracksuit as a linked set.", "+60 XP", None),
        },
    },
    {
        "code": "PAJAMA_PRIME",
        "category": "core",
        "difficulty": "easy",
        "repeatable": True,
        "cooldown_days": 180,
        "triggers": ["ITEM_CREATED"],
        "criterion": "Add a pajama set with full measurements.",
        "progress": "Checklist: top + bottom.",
        "validation": ["Complete within 72 hours of starting."],
        "rewards": {"xp": 50},
        "repeatability": "Every 180 days.",
        "reward_summary": "50 XP",
        "requirements_summary": "Complete pajama set.",
        "translations": {
            "pl": ("Piżama Prime", "Uzupełnij ulubioną piżamę o wszystkie potrzebne dane.", "+50 XP", None),
            "en": ("Pajama Prime", "Log a complete pajama set with all key attributes.", "+50 XP", None),
        },
    },
    {
        "code": "QUICK_SIZE",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 14,
        "triggers": ["ITEM_UPDATED", "MEASUREMENT_UPDATED"],
        "criterion": "Fill 5 missing fields within 5 minutes of entering the mission.",
        "progress": "Timer + missing field counter.",
        "validation": ["Lock edits outside the required fields while the window is open."],
        "rewards": {"xp": 40},
        "repeatability": "Every 14 days.",
        "reward_summary": "40 XP",
        "requirements_summary": "5 missing fields in 5 minutes.",
        "translations": {
            "pl": ("Szybki Rozmiar", "Uzupełnij pięć braków zanim upłynie pięć minut.", "+40 XP", None),
            "en": ("Quick Size", "Fill five missing fields within five minutes.", "+40 XP", None),
        },
    },
    {
        "code": "SPRING_REFRESH",
        "category": "seasonal",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 365,
        "season": (3, 4),
        "triggers": ["ITEM_UPDATED"],
        "criterion": "Update 10 existing entries during March or April.",
        "progress": "Update counter.",
        "validation": ["Each update must change real values."],
        "rewards": {"xp": 90, "badges": ["SPRING_BADGE"]},
        "repeatability": "Once per season.",
        "reward_summary": "90 XP + seasonal badge",
        "requirements_summary": "10 updates in March or April.",
        "translations": {
            "pl": ("Wiosenne Przeglądy", "Odśwież swoje wpisy na wiosnę – 10 aktualizacji w marcu lub kwietniu.",
                   "+90 XP • Odznaka sezonowa", None),
            "en": ("Spring Refresh", "Update ten existing items during March or April.", "+90 XP • Seasonal badge", None),
        },
    },
    {
        "code": "FALL_FIT",
        "category": "seasonal",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 365,
        "season": (8, 11),
        "triggers": ["ITEM_CREATED"],
        "criterion": "Add two outerwear pieces with complete fields before November 1st.",
        "progress": "0/2 outerwear pieces.",
        "validation": ["Two different entries."],
        "rewards": {"xp": 90},
        "repeatability": "Once per season.",
        "reward_summary": "90 XP",
        "requirements_summary": "2 complete outerwear entries in autumn.",
        "translations": {
            "pl": ("Jesienny Fit", "Przygotuj się na chłód – dwa okrycia wierzchnie z kompletnymi danymi.", "+90 XP", None),
            "en": ("Autumn Fit", "Log two outerwear pieces with full measurements before November.", "+90 XP", None),
        },
    },
    {
        "code": "BRA_MATTERS",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 180,
        "triggers": ["ITEM_CREATED"],
        "criterion": "Underbust circumference + cup + preferred cut.",
        "progress": "Complete field set.",
        "validation": ["Format validation, e.g. 75C."],
        "rewards": {"xp": 80},
        "repeatability": "Every 180 days.",
        "reward_summary": "80 XP",
        "requirements_summary": "Underbust, cup and cut preference.",
        "translations": {
            "pl": ("Miseczka ma znaczenie", "Zadbaj o dokładny pomiar biustonoszy i preferencji kroju.", "+80 XP", None),
            "en": ("Cup Matters", "Record underbust, cup and preferred cut for your bras.", "+80 XP", None),
        },
    },
    {
        "code": "WISHLIST_PRO",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["ITEM_CREATED", "WISHLIST_ITEM_CREATED"],
        "criterion": "Add 5 wishlist items linked to sizes.",
        "progress": "0/5 unique items.",
        "validation": ["Each item linked to a concrete size or label."],
        "anti_cheat": ["Count each wishlist item once (unique hash)."],
        "rewards": {"xp": 70, "extras": ["shareable_card"]},
        "repeatability": "Every 90 days.",
        "reward_summary": "70 XP + shareable card",
        "requirements_summary": "5 sized wishlist items.",
        "translations": {
            "pl": ("Prezentownik PRO", "Rozbuduj wishlistę o pięć pozycji z przypisanymi rozmiarami.",
                   "+70 XP • Udostępnialna karta", None),
            "en": ("Giftlist Pro", "Add five wishlist items linked with size data.", "+70 XP • Shareable card", None),
        },
    },
    {
        "code": "SECRET_HELPER",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 60,
        "triggers": ["ITEM_CREATED", "PROFILE_SHARED"],
        "criterion": "Share your size profile with one person (unique recipient).",
        "progress": "Share event + open confirmation.",
        "validation": ["Recipient confirmed (ping)."],
        "rewards": {"xp": 100},
        "repeatability": "Every 60 days.",
        "reward_summary": "100 XP",
        "requirements_summary": "Share the profile with one trusted person.",
        "translations": {
            "pl": ("Sekretny Pomocnik", "Wyślij swój profil rozmiarów zaufanej osobie.", "+100 XP", None),
            "en": ("Secret Helper", "Share your size profile with a trusted contact.", "+100 XP", None),
        },
    },
    {
        "code": "INVITE_AND_MEASURE",
        "category": "referral",
        "difficulty": "hard",
        "repeatable": True,
        "cooldown_days": 0,
        "triggers": ["INVITE_SENT", "INVITE_ACCEPTED", "INVITED_USER_PROGRESS"],
        "criterion": "Invite someone who adds 10 entries within 14 days.",
        "progress": "Workflow: invitation, acceptance, 10-entry milestone.",
        "validation": ["Track the invitee's progress."],
        "rewards": {"xp": 150, "extras": ["invitee_xp:50"]},
        "repeatability": "Unlimited.",
        "reward_summary": "150 XP (you) + 50 XP (invitee)",
        "requirements_summary": "Invitee logs 10 entries in 14 days.",
        "translations": {
            "pl": ("Zaproś i Zmierz", "Zaproszony znajomy ma 14 dni na dodanie 10 wpisów.",
                   "+150 XP (Ty) • +50 XP (On/Ona)", None),
            "en": ("Invite & Measure", "Invite someone who logs ten items within 14 days.",
                   "+150 XP (you) • +50 XP (invitee)", None),
        },
    },
    {
        "code": "TEAM_SIZES",
        "category": "team",
        "difficulty": "hard",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["CIRCLE_PROGRESS"],
        "criterion": "A circle (up to 5 people) fills 100 fields in 7 days, each member at least 10.",
        "progress": "Team counter + individual counters.",
        "validation": ["Monitor each member's contribution.", "At most 5 members."],
        "rewards": {"xp": 200, "badges": ["TEAM_BADGE"]},
        "repeatability": "Every 90 days.",
        "reward_summary": "200 XP per member + team badge",
        "requirements_summary": "100 fields as a circle in 7 days.",
        "translations": {
            "pl": ("Drużyna Rozmiarów", "Razem z kręgiem uzupełnijcie 100 pól w tydzień.",
                   "+200 XP/os • Odznaka zespołowa", None),
            "en": ("Size Squad", "As a circle, fill 100 fields in seven days.", "+200 XP per member • Team badge", None),
        },
    },
    {
        "code": "JEWEL_MAP",
        "category": "core",
        "difficulty": "easy",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["ITEM_CREATED"],
        "criterion": "Add 3 jewellery entries with values in mm/cm.",
        "progress": "0/3 entries.",
        "validation": ["Numeric fields in mm/cm."],
        "rewards": {"xp": 60},
        "repeatability": "Every 90 days.",
        "reward_summary": "60 XP",
        "requirements_summary": "3 measured jewellery items.",
        "translations": {
            "pl": ("Mapa Milimetra", "Dokładnie zmierz trzy elementy biżuterii.", "+60 XP", None),
            "en": ("Millimeter Map", "Log three jewellery items with exact mm/cm values.", "+60 XP", None),
        },
    },
    {
        "code": "HAT_MEASURE",
        "category": "core",
        "difficulty": "easy",
        "repeatable": True,
        "cooldown_days": 365,
        "triggers": ["ITEM_CREATED", "MEASUREMENT_UPDATED"],
        "criterion": "Head circumference + one beanie + one hat.",
        "progress": "0/2 accessories + head measurement.",
        "validation": ["Different subtypes."],
        "rewards": {"xp": 50},
        "repeatability": "Once a year.",
        "reward_summary": "50 XP",
        "requirements_summary": "Head size, a beanie and a hat.",
        "translations": {
            "pl": ("Kapelusz Miarą", "Zadbaj o dokładne dane dla czapki i kapelusza.", "+50 XP", None),
            "en": ("Hat Measure", "Measure your head and add one beanie plus one hat.", "+50 XP", None),
        },
    },
    {
        "code": "GLOVE_STANDARD",
        "category": "core",
        "difficulty": "easy",
        "repeatable": True,
        "cooldown_days": 365,
        "triggers": ["ITEM_CREATED"],
        "criterion": "Hand circumference + glove size.",
        "progress": "Complete field set.",
        "validation": ["Units in cm."],
        "rewards": {"xp": 50},
        "repeatability": "Once a year.",
        "reward_summary": "50 XP",
        "requirements_summary": "Hand size and glove size.",
        "translations": {
            "pl": ("Rękawiczny Standard", "Zmierz dokładnie dłoń i ulubione rękawice.", "+50 XP", None),
            "en": ("Glove Standard", "Log hand circumference and glove size.", "+50 XP", None),
        },
    },
    {
        "code": "BELT_PERFECT",
        "category": "core",
        "difficulty": "easy",
        "repeatable": True,
        "cooldown_days": 180,
        "triggers": ["ITEM_CREATED"],
        "criterion": "Belt size + length to the favourite hole.",
        "progress": "Complete field set.",
        "validation": ["Units in cm."],
        "rewards": {"xp": 40},
        "repeatability": "Every 180 days.",
        "reward_summary": "40 XP",
        "requirements_summary": "Belt size and hole distance.",
        "translations": {
            "pl": ("Pasek Idealny", "Zanotuj dokładną długość swojego ulubionego paska.", "+40 XP", None),
            "en": ("Perfect Belt", "Capture belt size and hole distance.", "+40 XP", None),
        },
    },
    {
        "code": "FIT_PHOTO",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["PHOTO_ADDED"],
        "criterion": "Add 3 reference photos to different entries.",
        "progress": "0/3 photos.",
        "validation": ["Photos attached to different entries."],
        "rewards": {"xp": 80},
        "repeatability": "Every 90 days.",
        "reward_summary": "80 XP",
        "requirements_summary": "3 reference photos.",
        "translations": {
            "pl": ("Fit Foto", "Dodaj zdjęcia referencyjne, aby ułatwić wybór rozmiarów.", "+80 XP", None),
            "en": ("Fit Photo", "Upload three reference photos for different items.", "+80 XP", None),
        },
    },
    {
        "code": "ACCURACY_PLUS_MINUS_ONE",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 30,
        "triggers": ["PURCHASE_LOGGED"],
        "criterion": "Add 3 purchase comparisons with fit feedback.",
        "progress": "0/3 comparisons.",
        "validation": ["Feedback must reference a logged purchase."],
        "rewards": {"xp": 70, "extras": ["fit_accuracy"]},
        "repeatability": "Every 30 days.",
        "reward_summary": "70 XP + fit accuracy boost",
        "requirements_summary": "3 purchases with fit feedback.",
        "translations": {
            "pl": ("Dokładność +/-1", "Analizuj zakupy, aby poprawić precyzję rekomendacji.",
                   "+70 XP • wskaźnik precyzji", None),
            "en": ("Accuracy +/-1", "Log purchase feedback to fine tune your fit accuracy.",
                   "+70 XP • Fit accuracy boost", None),
        },
    },
    {
        "code": "STREAK_RESCUER",
        "category": "streak",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 30,
        "triggers": ["ITEM_CREATED", "STREAK_UPDATED"],
        "criterion": "Keep a 14-day streak to earn a Freeze token.",
        "progress": "Current streak / 14 days.",
        "validation": ["Streak counted from daily activity."],
        "rewards": {"xp": 0, "freeze_tokens": 1},
        "repeatability": "Every 30 days.",
        "reward_summary": "+1 Freeze",
        "requirements_summary": "14 active days in a row.",
        "translations": {
            "pl": ("Streak Ratownik", "Utrzymaj serię 14 dni, zdobądź Freeze i uratuj streak w trudnym dniu.",
                   "+1 Freeze", None),
            "en": ("Streak Saver", "Keep a 14-day streak to earn a Freeze token.", "+1 Freeze token", None),
        },
    },
    {
        "code": "SIZE_ON_THE_WAY",
        "category": "core",
        "difficulty": "medium",
        "repeatable": True,
        "cooldown_days": 60,
        "triggers": ["ITEM_CREATED", "ITEM_UPDATED"],
        "criterion": "After 20 entries, fill 10 system-suggested fields.",
        "progress": "0/10 fields (suggested=true only).",
        "validation": ["Only fields flagged as suggested count."],
        "anti_cheat": ["Require the suggested=true flag."],
        "rewards": {"xp": 90},
        "repeatability": "Every 60 days.",
        "reward_summary": "90 XP",
        "requirements_summary": "10 suggested fields after 20 entries.",
        "translations": {
            "pl": ("Rozmiar w Drodze", "Skorzystaj z podpowiedzi systemu, aby dodać brakujące dane.", "+90 XP", None),
            "en": ("Size on the Way", "Complete ten system-suggested fields after logging 20 items.", "+90 XP", None),
        },
    },
    {
        "code": "CLOSET_SCANNER",
        "category": "core",
        "difficulty": "hard",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["ITEM_CREATED", "ITEM_UPDATED"],
        "criterion": "10 quick entries (title + key field), then fill the gaps within 72h.",
        "progress": "Stage 1/2.",
        "validation": ["72h window to complete.", "Only one field during quick logging."],
        "anti_cheat": ["Monitor the 72h window.", "Enforce gap completion."],
        "rewards": {"xp": 100},
        "repeatability": "Every quarter.",
        "reward_summary": "100 XP",
        "requirements_summary": "10 quick entries completed within 72h.",
        "translations": {
            "pl": ("Skaner Szafy", "Szybko wprowadź 10 pozycji, a następnie uzupełnij szczegóły.", "+100 XP", None),
            "en": ("Closet Scanner", "Rapid log ten items and fill missing details within 72h.", "+100 XP", None),
        },
    },
    {
        "code": "SIZE_AMBASSADOR",
        "category": "referral",
        "difficulty": "hard",
        "repeatable": True,
        "cooldown_days": 90,
        "triggers": ["INVITE_SENT", "INVITE_ACCEPTED", "INVITED_USER_PROGRESS"],
        "criterion": "Invite 3 people within 7 days; each adds 10 entries.",
        "progress": "People counter + entry milestone.",
        "validation": ["Anti-fraud, unique devices."],
        "rewards": {"xp": 300, "premium_days": 30},
        "repeatability": "Every quarter.",
        "reward_summary": "300 XP + 30 days Premium",
        "requirements_summary": "3 invitees in 7 days, 10 entries each.",
        "translations": {
            "pl": ("Ambasador Rozmiarów", "Sprowadź trzech aktywnych znajomych w tydzień.",
                   "+300 XP • 30 dni Premium", None),
            "en": ("Size Ambassador", "Invite three friends in a week; each must add ten items.",
                   "+300 XP • 30 days Premium", None),
        },
    },
]


def build_definition(data: Mapping[str, Any], display_order: int = 0) -> MissionDefinition:
    """Build a frozen definition from a raw catalog entry."""
    rewards = data.get("rewards", {})
    season = data.get("season")
    return MissionDefinition(
        code=data["code"],
        category=data["category"],
        difficulty=data.get("difficulty", "medium"),
        repeatable=bool(data.get("repeatable", False)),
        cooldown_days=int(data.get("cooldown_days", 0)),
        season=Season(*season) if season else None,
        rules=MissionRules(
            triggers=tuple(data.get("triggers", ())),
            criterion=data.get("criterion", ""),
            progress=data.get("progress", ""),
            validation=tuple(data.get("validation", ())),
            timeframe=data.get("timeframe"),
            notes=tuple(data.get("notes", ())),
            anti_cheat=tuple(data.get("anti_cheat", ())),
        ),
        rewards=MissionRewards(
            xp=int(rewards.get("xp", 0)),
            badges=tuple(rewards.get("badges", ())),
            unlocks=tuple(rewards.get("unlocks", ())),
            premium_days=rewards.get("premium_days"),
            freeze_tokens=rewards.get("freeze_tokens"),
            boosters=tuple(tuple(b) for b in rewards.get("boosters", ())),
            extras=tuple(rewards.get("extras", ())),
        ),
        translations=MappingProxyType({
            locale: MissionText(*text) for locale, text in data.get("translations", {}).items()
        }),
        repeatability=data.get("repeatability"),
        reward_summary=data.get("reward_summary", ""),
        requirements_summary=data.get("requirements_summary", ""),
        display_order=display_order,
    )


MISSION_CATALOG: tuple[MissionDefinition, ...] = tuple(
    build_definition(entry, display_order=index + 1) for index, entry in enumerate(_CATALOG_DATA)
)

_BY_CODE: Mapping[str, MissionDefinition] = MappingProxyType({m.code: m for m in MISSION_CATALOG})


def find_mission_definition(code: str) -> MissionDefinition | None:
    """Look up a definition by code (case-insensitive)."""
    return _BY_CODE.get(code.upper())


def mission_codes() -> list[str]:
    return [m.code for m in MISSION_CATALOG]
