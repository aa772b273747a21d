"""Tests for the CLI skills, driven through their argument parsers."""

from __future__ import annotations

import hashlib

import pytest

from lifework.claims.errors import CallerNotOwner, PermissionDenied
from lifework.config import RegistryConfig
from lifework.contract import CallContext, LifeAndWork
from lifework.skills import claim_query, claim_write, reward_admin


@pytest.fixture
def registry(tmp_path):
    return LifeAndWork(RegistryConfig(db_path=tmp_path / "lifework.db"))


def write(registry, *argv):
    return claim_write.run(registry, claim_write.build_parser().parse_args(list(argv)))


def query(registry, *argv):
    return claim_query.query(registry, claim_query.build_parser().parse_args(list(argv)))


def admin(registry, *argv):
    return reward_admin.run(registry, reward_admin.build_parser().parse_args(list(argv)))


class TestClaimWrite:
    def test_submit(self, registry):
        result = write(
            registry, "--caller", "alice", "submit",
            "--category", "expertise", "--content", "Blockchain", "--link", "https://cv",
        )
        assert result["status"] == "OK"
        claim = registry.full_details(result["fingerprint"])
        assert claim.content == b"Blockchain"
        assert claim.reference_link == b"https://cv"

    def test_submit_ip_from_file(self, registry, tmp_path):
        work = tmp_path / "paper.pdf"
        work.write_bytes(b"%PDF original research")
        result = write(
            registry, "--caller", "alice", "submit-ip",
            "--content", "Paper", "--file", str(work),
        )
        assert result["fingerprint"] == hashlib.sha256(b"%PDF original research").hexdigest()
        assert claim_write.hash_file(work) == result["fingerprint"]

    def test_endorse_and_hide(self, registry):
        fp = registry.submit_claim(CallContext("alice"), "education", b"BSc", b"")
        result = write(registry, "--caller", "bob", "endorse", "--fingerprint", fp)
        assert result == {"status": "OK", "stored": True, "endorsers": 2}

        result = write(registry, "--caller", "alice", "visibility", "--fingerprint", fp, "--hide")
        assert result == {"status": "OK", "visible": False}
        assert registry.full_details(fp).visible is False

    def test_registry_errors_propagate(self, registry):
        fp = registry.submit_claim(CallContext("alice"), "education", b"BSc", b"")
        with pytest.raises(CallerNotOwner) as exc:
            write(registry, "--caller", "bob", "visibility", "--fingerprint", fp, "--hide")
        assert exc.value.to_dict()["error"] == "CallerNotOwner"

    def test_keyword_submit_rejects_ip_category(self):
        with pytest.raises(SystemExit):
            claim_write.build_parser().parse_args(
                ["submit", "--category", "intellectual_property", "--content", "x"]
            )


class TestClaimQuery:
    def test_resume(self, registry):
        registry.submit_claim(CallContext("alice"), "education", b"BSc", b"")
        registry.submit_claim(CallContext("alice"), "work_history", b"Engineer", b"")
        result = query(registry, "--resume", "alice")
        assert result["claim_count"] == 2
        assert [c["content"] for c in result["claims"]] == ["Engineer", "BSc"]

    def test_details_not_found(self, registry):
        result = query(registry, "--details", "ab" * 32)
        assert result["status"] == "NOT_FOUND"
        assert result["claim"]["category"] == "UNSET"

    def test_search(self, registry):
        registry.submit_claim(CallContext("alice"), "expertise", b"Blockchain, Rust", b"")
        registry.submit_claim(CallContext("bob"), "expertise", b"Painting", b"")
        result = query(registry, "--search", "Rust")
        assert result["match_count"] == 1
        assert result["matches"][0]["claimant"] == "alice"

    def test_verify_account(self, registry):
        registry.submit_claim(CallContext("alice"), "good_deed", b"Volunteered", b"")
        result = query(registry, "--verify-account", "alice")
        assert result["counts"] == {
            "WORK_HISTORY": 0,
            "EDUCATION": 0,
            "EXPERTISE": 0,
            "GOOD_DEED": 1,
            "INTELLECTUAL_PROPERTY": 0,
        }

    def test_stats(self, registry):
        registry.submit_claim(CallContext("alice"), "good_deed", b"Volunteered", b"")
        result = query(registry, "--stats")
        assert result["status"] == "OK"
        assert result["total_claims"] == 1


class TestRewardAdmin:
    def test_full_program(self, registry):
        registry.deposit("root", 1_000)
        admin(registry, "--caller", "root", "set-root", "--account", "root")
        admin(registry, "--caller", "root", "configure", "--enable", "--interval", "1", "--amount", "50")
        assert admin(registry, "--caller", "root", "fund", "--value", "500")["reward_balance"] == 500

        registry.submit_claim(CallContext("alice"), "expertise", b"Rust", b"")
        assert registry.balance_of("alice") == 50

        settings = admin(registry, "--caller", "root", "settings")["settings"]
        assert settings["total_paid"] == 50
        assert settings["balance"] == 450

        result = admin(registry, "--caller", "root", "shutdown")
        assert result["refunded"] == 500 - 50 - 10

    def test_events_verify(self, registry):
        registry.submit_claim(CallContext("alice"), "expertise", b"Rust", b"")
        result = admin(registry, "events", "--verify", "--recent", "5")
        assert result["event_log_integrity"] == "CLEAN"
        assert result["event_count"] == 1
        assert result["events"][0]["event_type"] == "ClaimMadeExpertise"

    def test_non_root_configure(self, registry):
        admin(registry, "--caller", "root", "set-root", "--account", "root")
        with pytest.raises(PermissionDenied):
            admin(registry, "--caller", "mallory", "configure", "--interval", "1", "--amount", "1")
