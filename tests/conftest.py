"""Shared fixtures for tests."""

import json
from pathlib import Path

import pytest

from xcreport.schema.errors import ReferenceResolutionError


class MemoryResolver:
    """Resolver over in-memory records, for pipeline tests."""

    def __init__(
        self,
        records: dict,
        payloads: dict | None = None,
        coverage=None,
        coverage_error: Exception | None = None,
    ):
        self.records = records
        self.payloads = payloads or {}
        self.coverage = coverage
        self.coverage_error = coverage_error
        self.resolved: list[str | None] = []

    async def resolve(self, ref=None):
        self.resolved.append(ref)
        key = "root" if ref is None else ref
        if key not in self.records:
            raise ReferenceResolutionError(ref)
        return self.records[key]

    async def export_payload(self, ref):
        if ref not in self.payloads:
            raise ReferenceResolutionError(ref)
        return self.payloads[ref]

    async def export_code_coverage(self):
        if self.coverage_error is not None:
            raise self.coverage_error
        return self.coverage


def leaf(name: str, status: str, duration: float | None = None, **extra) -> dict:
    data = {"name": name, "identifier": name, "testStatus": status}
    if duration is not None:
        data["duration"] = duration
    data.update(extra)
    return data


def group(name: str, *children: dict) -> dict:
    return {"name": name, "subtests": list(children)}


@pytest.fixture
def bundle_records() -> dict:
    """Return the records of a bundle with one test action."""
    return {
        "root": {
            "metadataRef": {"id": "meta"},
            "actions": [
                {
                    "schemeCommandName": "Test",
                    "title": "Testing project App",
                    "runDestination": {"displayName": "iPhone 15"},
                    "buildResult": {"logRef": {"id": "buildlog"}},
                    "actionResult": {
                        "testsRef": {"id": "tests"},
                        "coverage": {"hasCoverageData": True},
                    },
                }
            ],
        },
        "meta": {
            "creatingWorkspaceFilePath": "/work/App.xcworkspace",
            "schemeIdentifier": {"entityName": "App"},
        },
        "buildlog": {"title": "Build App", "subsections": [], "messages": []},
        "tests": {
            "summaries": [
                {
                    "name": "Test Scheme Action",
                    "testableSummaries": [
                        {
                            "name": "AppTests",
                            "tests": [
                                group(
                                    "All tests",
                                    group(
                                        "AppTests.xctest",
                                        group(
                                            "LoginTests",
                                            leaf("testLogin()", "Success", 0.1),
                                            leaf(
                                                "testLogout()",
                                                "Failure",
                                                0.2,
                                                summaryRef={"id": "logout"},
                                            ),
                                        ),
                                        group(
                                            "CartTests",
                                            leaf("testAdd()", "Success", 0.05),
                                            leaf("testRemove()", "Skipped", 0),
                                        ),
                                    ),
                                )
                            ],
                        }
                    ],
                }
            ]
        },
        "logout": {
            "name": "testLogout()",
            "testStatus": "Failure",
            "failureSummaries": [
                {
                    "fileName": "/work/AppTests/LoginTests.swift",
                    "lineNumber": 42,
                    "issueType": "Assertion Failure",
                    "message": "XCTAssertTrue failed",
                }
            ],
            "activitySummaries": [
                {
                    "title": "Start Test",
                    "subactivities": [
                        {
                            "title": "Tap logout",
                            "attachments": [
                                {
                                    "filename": "screen.png",
                                    "payloadRef": {"id": "shot"},
                                }
                            ],
                        }
                    ],
                },
                {"title": "Tear Down"},
            ],
        },
    }


@pytest.fixture
def resolver(bundle_records) -> MemoryResolver:
    """Return an in-memory resolver over the sample bundle."""
    return MemoryResolver(
        bundle_records,
        payloads={"shot": b"\x89PNG"},
        coverage={"lineCoverage": 0.75},
    )


@pytest.fixture
def bundle_dir(tmp_path, bundle_records) -> Path:
    """Write the sample bundle to disk and return its directory."""
    path = tmp_path / "bundle"
    path.mkdir()
    for ref, record in bundle_records.items():
        (path / f"{ref}.json").write_text(json.dumps(record))
    (path / "payloads").mkdir()
    (path / "payloads" / "shot").write_bytes(b"\x89PNG")
    (path / "coverage.json").write_text(json.dumps({"lineCoverage": 0.75}))
    return path


@pytest.fixture
def make_leaf():
    """Return a builder for raw leaf records."""
    return leaf


@pytest.fixture
def make_group():
    """Return a builder for raw group records."""
    return group


@pytest.fixture
def memory_resolver():
    """Return the in-memory resolver class."""
    return MemoryResolver
