"""Tests for project search matching."""

from __future__ import annotations

import unittest

from vercelx.api.models import Creator, DeploymentRecord, ProjectRecord
from vercelx.listing.filtering import filter_items, filter_records, normalize_query
from vercelx.listing.state import ListItem


def _record(
    project_id: str,
    name: str,
    *,
    state: str | None = None,
    creator: str | None = None,
    loading: bool = False,
) -> ProjectRecord:
    deployment = None
    if state is not None:
        deployment = DeploymentRecord(
            uid=f"dpl_{project_id}",
            state=state,
            created_at=0,
            creator=Creator(username=creator) if creator else None,
        )
    return ProjectRecord(
        id=project_id,
        name=name,
        account_id=None,
        created_at=0,
        updated_at=0,
        last_deployment=deployment,
        deployment_loading=loading,
    )


def _item(record: ProjectRecord) -> ListItem:
    return ListItem(id=record.id, display_text=record.name, source_key=record.name)


class FilterRecordsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.records = [
            _record("p1", "myapp-frontend"),
            _record("p2", "api", state="READY", creator="myapp_bot"),
            _record("p3", "docs", state="ERROR", creator="ana"),
            _record("p4", "landing"),
            _record("p5", "blog", loading=True),
        ]

    def _ids(self, query: str) -> list[str]:
        return [record.id for record in filter_records(self.records, query)]

    def test_name_and_creator_matches(self) -> None:
        self.assertEqual(self._ids("myapp"), ["p1", "p2"])

    def test_matching_is_case_insensitive_and_trimmed(self) -> None:
        self.assertEqual(self._ids("  MyApp "), ["p1", "p2"])
        self.assertEqual(normalize_query("  DOCS "), "docs")

    def test_state_keyword_matches_deployment_state(self) -> None:
        self.assertEqual(self._ids("ready"), ["p2"])
        self.assertEqual(self._ids("error"), ["p3"])

    def test_never_matches_only_finished_projects_without_deployments(self) -> None:
        self.assertEqual(self._ids("never"), ["p1", "p4"])

    def test_empty_query_matches_everything(self) -> None:
        self.assertEqual(len(self._ids("")), len(self.records))

    def test_no_match(self) -> None:
        self.assertEqual(self._ids("zzz"), [])


class FilterItemsTests(unittest.TestCase):
    def test_empty_query_returns_baseline_copy(self) -> None:
        records = [_record("p1", "a"), _record("p2", "b")]
        baseline = [_item(record) for record in reversed(records)]

        items = filter_items(baseline, records, "  ", _item)

        self.assertEqual(items, baseline)
        self.assertIsNot(items, baseline)

    def test_query_formats_matching_records(self) -> None:
        records = [_record("p1", "alpha"), _record("p2", "beta")]
        items = filter_items([], records, "alp", _item)
        self.assertEqual([item.id for item in items], ["p1"])


if __name__ == "__main__":
    unittest.main()
