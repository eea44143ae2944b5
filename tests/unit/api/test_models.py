"""Tests for lenient decoding of Vercel API payloads."""

from __future__ import annotations

import unittest

from vercelx.api.models import DeploymentRecord, Domain, GitLink, ProjectRecord, Team, User


class ModelDecodingTests(unittest.TestCase):
    def test_project_with_link(self) -> None:
        record = ProjectRecord.from_api(
            {
                "id": "prj_1",
                "name": "web",
                "accountId": "team_1",
                "createdAt": 10,
                "updatedAt": 20,
                "link": {"type": "github", "org": "acme", "repo": "web", "productionBranch": "main"},
                "extra": "ignored",
            }
        )

        self.assertEqual((record.id, record.account_id, record.created_at, record.updated_at), ("prj_1", "team_1", 10, 20))
        self.assertEqual(record.link.full_name, "acme/web")
        self.assertIsNone(record.last_deployment)
        self.assertFalse(record.deployment_loading)

    def test_missing_fields_fall_back(self) -> None:
        record = ProjectRecord.from_api({"id": "prj_1", "name": "web", "createdAt": "soon"})
        self.assertEqual(record.created_at, 0)
        self.assertIsNone(record.account_id)
        self.assertIsNone(record.link)
        self.assertIsNone(GitLink(org="acme").full_name)

    def test_loading_and_deployment_copies(self) -> None:
        record = ProjectRecord.from_api({"id": "prj_1", "name": "web"})
        loading = record.as_loading()
        self.assertTrue(loading.deployment_loading)

        deployment = DeploymentRecord.from_api({"uid": "d", "readyState": "ERROR", "created": 5})
        done = loading.with_deployment(deployment)
        self.assertFalse(done.deployment_loading)
        self.assertEqual(done.last_deployment.state, "ERROR")
        self.assertEqual(done.last_deployment.created_at, 5)

    def test_deployment_without_creator(self) -> None:
        deployment = DeploymentRecord.from_api({"uid": "d", "creator": "nope"})
        self.assertIsNone(deployment.creator)
        self.assertIsNone(deployment.state)

    def test_domain_kind(self) -> None:
        production = Domain.from_api({"name": "web.dev"})
        preview = Domain.from_api({"name": "p.web.dev", "gitBranch": "feat", "verified": False, "redirect": "web.dev"})
        self.assertTrue(production.is_production)
        self.assertTrue(production.verified)
        self.assertFalse(preview.is_production)
        self.assertEqual(preview.redirect, "web.dev")

    def test_team_and_user(self) -> None:
        self.assertEqual(Team.from_api({"id": "t1", "slug": "acme"}), Team(id="t1", name="acme", slug="acme"))
        self.assertEqual(User.from_api({"id": "u1", "username": "ana"}).uid, "u1")


if __name__ == "__main__":
    unittest.main()
