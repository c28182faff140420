"""Rule-based waste reduction suggestions.

Reads the already-aggregated WasteStats; each rule looks at one signal and
contributes at most one suggestion.
"""
from dataclasses import asdict, dataclass

from ..database import WasteStats

HIGH = "high"
MEDIUM = "medium"
LOW = "low"

PRIORITY_ORDER = {HIGH: 0, MEDIUM: 1, LOW: 2}

# Share of items above which a condition or category is called out
DOMINANT_SHARE = 0.4

# Average value per entry (USD) considered costly
COSTLY_ENTRY_VALUE = 5.0

# Times an item must recur before it is called out
REPEAT_THRESHOLD = 3


@dataclass
class Suggestion:
    """A single actionable suggestion."""
    title: str
    description: str
    priority: str = MEDIUM
    category: str = "general"

    def to_dict(self) -> dict:
        return asdict(self)


def _share(counts: dict[str, int], key: str, total: int) -> float:
    return counts.get(key, 0) / total if total else 0.0


def generate_suggestions(stats: WasteStats) -> list[Suggestion]:
    """Build suggestions from aggregated stats, highest priority first."""
    if stats.total_entries == 0:
        return [
            Suggestion(
                title="Start tracking your food waste",
                description="Upload a photo of your leftovers to get personalised suggestions.",
                priority=LOW,
                category="getting_started",
            )
        ]

    suggestions: list[Suggestion] = []
    total_items = stats.total_items

    if _share(stats.conditions, "untouched", total_items) >= DOMINANT_SHARE:
        suggestions.append(
            Suggestion(
                title="Serve smaller portions",
                description=(
                    "Many wasted items were never touched. Try plating less and "
                    "going back for seconds instead."
                ),
                priority=HIGH,
                category="portions",
            )
        )

    spoiled = _share(stats.conditions, "spoiled", total_items) + _share(
        stats.conditions, "expired", total_items
    )
    if spoiled >= DOMINANT_SHARE:
        suggestions.append(
            Suggestion(
                title="Use food before it spoils",
                description=(
                    "A large share of waste is spoiled or expired. Plan meals around "
                    "what is already in the fridge and store leftovers in airtight containers."
                ),
                priority=HIGH,
                category="storage",
            )
        )

    if _share(stats.conditions, "partially eaten", total_items) >= DOMINANT_SHARE:
        suggestions.append(
            Suggestion(
                title="Save partially eaten leftovers",
                description="Much of your waste is partially eaten. Pack leftovers for the next day's lunch.",
                priority=MEDIUM,
                category="leftovers",
            )
        )

    for item in stats.top_items:
        if item["count"] >= REPEAT_THRESHOLD:
            suggestions.append(
                Suggestion(
                    title=f"Buy or cook less {item['name']}",
                    description=(
                        f"{item['name'].capitalize()} shows up in your waste "
                        f"{item['count']} times. Consider reducing how much you prepare."
                    ),
                    priority=MEDIUM,
                    category="shopping",
                )
            )
            break

    if stats.categories:
        top_category, count = max(stats.categories.items(), key=lambda kv: kv[1])
        if top_category != "unknown" and count / total_items >= DOMINANT_SHARE:
            suggestions.append(
                Suggestion(
                    title=f"Rethink your {top_category} portions",
                    description=f"Most wasted items are {top_category}s. Adjust how much of them you serve.",
                    priority=LOW,
                    category="portions",
                )
            )

    if stats.average_value_per_entry >= COSTLY_ENTRY_VALUE:
        suggestions.append(
            Suggestion(
                title="Cut the cost of waste",
                description=(
                    f"Each logged meal wastes about ${stats.average_value_per_entry:.2f}. "
                    "Meal planning and a shopping list can bring this down."
                ),
                priority=HIGH,
                category="cost",
            )
        )

    if not suggestions:
        suggestions.append(
            Suggestion(
                title="Keep it up",
                description="No strong waste pattern stands out. Keep logging to spot trends.",
                priority=LOW,
            )
        )

    suggestions.sort(key=lambda s: PRIORITY_ORDER.get(s.priority, len(PRIORITY_ORDER)))
    return suggestions
