"""Tests for the match blueprint."""

import unittest

from stormcloud.auth.permissions import (
    ASSOCIATE,
    DELETE_ALL,
    READ_ALL,
    WRITE_ALL,
)
from stormcloud.core.constants import MATCHES
from stormcloud.errors import ValidationError
from stormcloud.match.models import MatchSubmission

from .helpers import TEST_ENVIRONMENT, BaseTestCase


class MatchSubmissionTestCase(unittest.TestCase):
    """Test case for building matches from request bodies."""

    def test_from_form_payload(self):
        """Test that form strings are coerced."""
        submission = MatchSubmission.from_payload(
            {
                "competition": "2024txcmp",
                "matchNumber": "12",
                "teams": "2468, 118,148",
                "locked": "true",
            }
        )

        self.assertEqual(submission.match_number, 12)
        self.assertEqual(submission.teams, ["2468", "118", "148"])
        self.assertTrue(submission.locked)
        self.assertIsNone(submission.date)

    def test_invalid_match_number(self):
        """Test that a non-numeric match number is rejected."""
        with self.assertRaises(ValidationError):
            MatchSubmission.from_payload({"competition": "c", "matchNumber": "first"})

    def test_validate(self):
        """Test that negative numbers and missing competitions are rejected."""
        with self.assertRaises(ValidationError):
            MatchSubmission(competition="c", match_number=-1).validate()
        with self.assertRaises(ValidationError):
            MatchSubmission(competition="", match_number=1).validate()


class MatchRoutesTestCase(BaseTestCase):
    """Test case for the match routes."""

    def test_list_matches_requires_read_all(self):
        """Test that listing matches needs READ_ALL."""
        self.assertEqual(self.client.get("/api/matches").status_code, 401)

        self.login_as(WRITE_ALL)
        self.assertEqual(self.client.get("/api/matches").status_code, 401)

    def test_create_and_list_match(self):
        """Test that a created match is listed with an empty document list."""
        self.login_as(WRITE_ALL, READ_ALL)

        response = self.client.post(
            "/api/match",
            json={"competition": "2024txcmp", "matchNumber": 4, "teams": [2468]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json["message"], "Match created!")
        match_id = response.json["match"]["_id"]

        response = self.client.get("/api/matches")
        self.assertEqual(response.status_code, 200)
        [match] = response.json["matches"]
        self.assertEqual(match["_id"], match_id)
        self.assertEqual(match["matchNumber"], 4)
        self.assertEqual(match["environment"], TEST_ENVIRONMENT)
        self.assertEqual(match["documents"], [])
        self.assertEqual(response.json["unassignedDocuments"], [])

    def test_create_match_unauthorized(self):
        """Test that creating a match without WRITE_ALL stores nothing."""
        self.login_as(READ_ALL, ASSOCIATE)

        response = self.client.post(
            "/api/match", json={"competition": "2024txcmp", "matchNumber": 1}
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.db[MATCHES].count_documents({}), 0)

    def test_create_match_missing_fields(self):
        """Test that a match needs a competition and a number."""
        self.login_as(WRITE_ALL)

        response = self.client.post("/api/match", json={"competition": "2024txcmp"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("matchNumber", response.json["message"])

    def test_list_expands_documents(self):
        """Test that matches carry their documents and the rest are unassigned."""
        attached = self.create_document("match", '{"Score": 12}')
        loose = self.create_document("match")
        self.create_document("pit")
        self.create_match(1, documents=[attached, "deleted-document"])
        self.create_match(2, competition="2023txcmp")
        self.login_as(READ_ALL)

        response = self.client.get("/api/matches")

        matches = {m["matchNumber"]: m for m in response.json["matches"]}
        self.assertEqual([d["_id"] for d in matches[1]["documents"]], [attached])
        self.assertEqual(matches[1]["documents"][0]["json"], '{"Score": 12}')
        self.assertEqual(
            [d["_id"] for d in response.json["unassignedDocuments"]], [loose]
        )

    def test_list_filters(self):
        """Test the competition and dataType query filters."""
        self.create_match(1, competition="2024txcmp")
        self.create_match(2, competition="2023txcmp")
        self.create_document("pit")
        self.create_document("note")
        self.login_as(READ_ALL)

        response = self.client.get("/api/matches?competition=2024txcmp&dataType=pit")

        self.assertEqual([m["matchNumber"] for m in response.json["matches"]], [1])
        self.assertEqual(
            [d["dataType"] for d in response.json["unassignedDocuments"]], ["pit"]
        )

    def test_list_defaults_to_match_documents(self):
        """Test that only match documents are listed unless asked otherwise."""
        scouted = self.create_document("match")
        pit = self.create_document("pit")
        self.create_match(1, documents=[scouted, pit])
        self.login_as(READ_ALL)

        response = self.client.get("/api/matches")
        [match] = response.json["matches"]
        self.assertEqual([d["_id"] for d in match["documents"]], [scouted])

        response = self.client.get("/api/matches?dataType=")
        [match] = response.json["matches"]
        self.assertEqual([d["_id"] for d in match["documents"]], [scouted, pit])

    def test_list_matches_subpath(self):
        """Test that any path under /matches lists matches."""
        self.create_match(1)
        self.login_as(READ_ALL)

        response = self.client.get("/api/matches/2024txcmp")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json["matches"]), 1)

    def test_matches_are_scoped_to_environment(self):
        """Test that matches of other environments are not listed."""
        self.db[MATCHES].insert_one(
            {"environment": "production", "matchNumber": 9, "documents": []}
        )
        self.login_as(READ_ALL)

        response = self.client.get("/api/matches")

        self.assertEqual(response.json["matches"], [])

    def test_add_and_remove_document(self):
        """Test that adding then removing a document restores the list."""
        doc_id = self.create_document()
        other_id = self.create_document()
        match_id = self.create_match(documents=[other_id])
        self.login_as(ASSOCIATE)

        response = self.client.post(
            "/api/match/document", json={"matchId": match_id, "docId": doc_id}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json["message"], "Document added!")
        self.assertEqual(self.get_match(match_id)["documents"], [other_id, doc_id])

        response = self.client.delete(
            "/api/match/document", json={"matchId": match_id, "docId": doc_id}
        )
        self.assertEqual(response.json["message"], "Document removed!")
        self.assertEqual(self.get_match(match_id)["documents"], [other_id])

    def test_remove_document_rejects_operator_ids(self):
        """Test that a docId must be a string and cannot match every id."""
        first = self.create_document()
        second = self.create_document()
        match_id = self.create_match(documents=[first, second])
        self.login_as(ASSOCIATE)

        for payload in (
            {"matchId": match_id, "docId": {"$ne": ""}},
            {"matchId": {"$gt": ""}, "docId": first},
        ):
            with self.subTest(payload=payload):
                response = self.client.delete("/api/match/document", json=payload)
                self.assertEqual(response.status_code, 400)

        self.assertEqual(self.get_match(match_id)["documents"], [first, second])

    def test_add_document_twice(self):
        """Test that a document is attached at most once."""
        doc_id = self.create_document()
        match_id = self.create_match()
        self.login_as(ASSOCIATE)

        for _ in range(2):
            self.client.post(
                "/api/match/document", json={"matchId": match_id, "docId": doc_id}
            )

        self.assertEqual(self.get_match(match_id)["documents"], [doc_id])

    def test_add_missing_document(self):
        """Test that unknown matches and documents answer 404."""
        doc_id = self.create_document()
        match_id = self.create_match()
        self.login_as(ASSOCIATE)

        response = self.client.post(
            "/api/match/document",
            json={"matchId": match_id, "docId": "0123456789abcdef01234567"},
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json["message"], "Document not found!")

        response = self.client.post(
            "/api/match/document",
            json={"matchId": "0123456789abcdef01234567", "docId": doc_id},
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json["message"], "Match not found!")

    def test_add_document_unauthorized(self):
        """Test that associating needs ASSOCIATE and changes nothing otherwise."""
        doc_id = self.create_document()
        match_id = self.create_match()
        self.login_as(READ_ALL, WRITE_ALL)

        response = self.client.post(
            "/api/match/document", json={"matchId": match_id, "docId": doc_id}
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.get_match(match_id)["documents"], [])

    def test_delete_match(self):
        """Test that a match can be deleted once."""
        match_id = self.create_match()
        self.login_as(DELETE_ALL)

        response = self.client.delete("/api/match", json={"matchId": match_id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json["message"], "Match deleted!")
        self.assertIsNone(self.get_match(match_id))

        response = self.client.delete("/api/match", json={"matchId": match_id})
        self.assertEqual(response.status_code, 404)

    def test_delete_match_unauthorized(self):
        """Test that deleting a match needs DELETE_ALL."""
        match_id = self.create_match()

        response = self.client.delete("/api/match", json={"matchId": match_id})

        self.assertEqual(response.status_code, 401)
        self.assertIsNotNone(self.get_match(match_id))


if __name__ == "__main__":
    unittest.main()
