from typing import List, Sequence

from core.group_resolver import ResolvedGroup


def total_duplicates(groups: Sequence[ResolvedGroup]) -> int:
    return sum(g.num_duplicates for g in groups)


class ConsoleReportGenerator:
    """
    Render duplicate groups as plain console lines
    """

    def render(self, groups: Sequence[ResolvedGroup]) -> List[str]:
        lines = [""]

        num_duplicates = total_duplicates(groups)
        if num_duplicates > 0:
            lines.append(f"Complete, {num_duplicates} duplicate images found")
        else:
            lines.append("Complete, no duplicate images found")

        for group in groups:
            lines.extend(self._render_group(group))
            lines.append("")

        return lines

    def _render_group(self, group: ResolvedGroup) -> List[str]:
        lines = [f"{group.original.name} ({group.num_duplicates} duplicates)"]

        for i, dup in enumerate(group.duplicates, 1):
            lines.append(f" {i}: {dup.name}")

        return lines

    def print_report(self, groups: Sequence[ResolvedGroup]):
        for line in self.render(groups):
            print(line)
