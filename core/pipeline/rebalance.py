#!/usr/bin/env python3
"""
Interviewer Load Rebalancing.

Load levels compare each owner's upcoming interview count with the mean over
owners that have at least one: >= mean+1 is high, <= mean-1 is low.

Rebalancing is greedy, not an optimal assignment: every overloaded owner hands
its next upcoming interviews, one at a time, to whichever underloaded owner
currently has the fewest (virtual) interviews. An owner stops giving once the
gap to that target is <= 1, or when its interviews or the targets run out.
"""

from typing import Dict, List, Sequence
import logging

from core.pipeline.models import InterviewLoadStat, LoadLevel, RebalanceSuggestion

logger = logging.getLogger(__name__)


def compute_load_stats(interviews: Sequence) -> List[InterviewLoadStat]:
    """Group upcoming interviews by owner; busiest owner first."""
    by_owner: Dict[str, dict] = {}
    for interview in interviews:
        entry = by_owner.get(interview.owner)
        if entry is None:
            by_owner[interview.owner] = {'scheduled': 1, 'next': interview.scheduled_at}
            continue
        entry['scheduled'] += 1
        if entry['next'] is None or interview.scheduled_at < entry['next']:
            entry['next'] = interview.scheduled_at

    if not by_owner:
        return []

    mean = sum(entry['scheduled'] for entry in by_owner.values()) / len(by_owner)

    stats = []
    for owner, entry in by_owner.items():
        if entry['scheduled'] >= mean + 1:
            level = LoadLevel.HIGH
        elif entry['scheduled'] <= mean - 1:
            level = LoadLevel.LOW
        else:
            level = LoadLevel.BALANCED
        stats.append(InterviewLoadStat(
            owner=owner,
            scheduled=entry['scheduled'],
            next_interview_at=entry['next'],
            load_level=level
        ))

    stats.sort(key=lambda stat: stat.scheduled, reverse=True)
    return stats


def suggest_rebalance(load_stats: List[InterviewLoadStat], interviews: Sequence) -> List[RebalanceSuggestion]:
    virtual_counts = {stat.owner: stat.scheduled for stat in load_stats}
    overloaded = [stat.owner for stat in load_stats if stat.load_level == LoadLevel.HIGH]
    underloaded = [stat.owner for stat in load_stats if stat.load_level == LoadLevel.LOW]

    pools = {
        owner: [interview for interview in interviews if interview.owner == owner]
        for owner in overloaded
    }

    suggestions: List[RebalanceSuggestion] = []
    for source in overloaded:
        pool = pools[source]
        while underloaded and pool:
            interview = pool.pop(0)
            underloaded.sort(key=lambda owner: virtual_counts[owner])
            target = underloaded[0]
            source_count = virtual_counts[source]
            target_count = virtual_counts[target]

            if source_count - target_count <= 1:
                break

            virtual_counts[source] = source_count - 1
            virtual_counts[target] = target_count + 1

            suggestions.append(RebalanceSuggestion(
                interview_id=interview.id,
                person=interview.person,
                current_owner=source,
                suggested_owner=target,
                scheduled_at=interview.scheduled_at,
                reason=(
                    f"Reduce interviewer load from {source_count} to {source_count - 1}, "
                    f"and raise {target} from {target_count} to {target_count + 1}."
                )
            ))

    if suggestions:
        logger.debug(f"Suggested {len(suggestions)} interview move(s)")
    return suggestions
