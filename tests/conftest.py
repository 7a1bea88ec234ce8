"""Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup
- Sample QPL manifest and QTI assessment documents
- Package folder builders on top of tmp_path
"""

import os
from pathlib import Path
from typing import Callable, Generator

import pytest

# Set application environment variables BEFORE importing any application code
os.environ["LOG_LEVEL"] = "DEBUG"

from src.shared.config import clear_settings_cache  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Reload settings from the environment for every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_manifest_xml() -> bytes:
    """Question pool manifest as written by a typical LMS export."""
    return """<?xml version="1.0" encoding="utf-8"?>
<ContentObject Type="Questionpool_Test">
    <MetaData>
        <General Structure="Hierarchical">
            <Identifier Catalog="ILIAS" Entry="il_0_qpl_4521"/>
            <Title Language="en">Chemistry basics</Title>
            <Language Language="en"/>
            <Description Language="en">Atoms, bonds and the periodic table</Description>
            <Keyword Language="de">Chemie</Keyword>
        </General>
    </MetaData>
    <Settings>
        <ShowTaxonomies>0</ShowTaxonomies>
    </Settings>
</ContentObject>
""".encode("utf-8")


@pytest.fixture
def sample_assessment_xml() -> bytes:
    """QTI document with a fully populated item and a sparse one."""
    return """<?xml version="1.0" encoding="utf-8"?>
<questestinterop>
    <item ident="il_0_qst_101" title="Noble gases" maxattempts="2">
        <qticomment>Pick the noble gas</qticomment>
        <duration>P0Y0M0DT0H1M0S</duration>
        <itemmetadata>
            <qtimetadata>
                <qtimetadatafield>
                    <fieldlabel>QUESTIONTYPE</fieldlabel>
                    <fieldentry>SINGLE CHOICE QUESTION</fieldentry>
                </qtimetadatafield>
                <qtimetadatafield>
                    <fieldlabel>AUTHOR</fieldlabel>
                    <fieldentry>J. Doe</fieldentry>
                </qtimetadatafield>
                <qtimetadatafield>
                    <fieldlabel>AUTHOR</fieldlabel>
                    <fieldentry>A. Smith</fieldentry>
                </qtimetadatafield>
            </qtimetadata>
        </itemmetadata>
        <presentation label="Noble gases">
            <flow>
                <material>
                    <mattext texttype="text/xhtml">&lt;p&gt;Which of these is a noble gas?&lt;/p&gt;</mattext>
                    <matimage label="atom.png" uri="objects/il_0_mob_7/atom.png"/>
                </material>
                <response_lid ident="MCSR" rcardinality="Single">
                    <render_choice shuffle="Yes">
                        <response_label ident="0">
                            <material>
                                <mattext texttype="text/plain">Neon</mattext>
                            </material>
                        </response_label>
                        <response_label ident="1">
                            <material>
                                <mattext texttype="text/plain">Oxygen</mattext>
                            </material>
                        </response_label>
                        <response_label ident="2">
                            <material>
                                <mattext texttype="text/plain">Nitrogen</mattext>
                            </material>
                        </response_label>
                    </render_choice>
                </response_lid>
            </flow>
        </presentation>
        <resprocessing>
            <outcomes>
                <decvar>SCORE</decvar>
            </outcomes>
            <respcondition continue="Yes">
                <conditionvar>
                    <varequal respident="MCSR">0</varequal>
                </conditionvar>
                <setvar action="Add">2</setvar>
                <displayfeedback feedbacktype="Response" linkrefid="response_0"/>
            </respcondition>
            <respcondition continue="Yes">
                <conditionvar>
                    <not>
                        <varequal respident="MCSR">0</varequal>
                    </not>
                </conditionvar>
                <setvar action="Add">0</setvar>
                <displayfeedback feedbacktype="Response" linkrefid="response_allnot"/>
            </respcondition>
        </resprocessing>
        <itemfeedback ident="response_0" view="All">
            <flow_mat>
                <material>
                    <mattext texttype="text/plain">Correct, neon is inert.</mattext>
                </material>
            </flow_mat>
        </itemfeedback>
        <itemfeedback ident="response_allnot" view="All">
            <flow_mat>
                <material>
                    <mattext texttype="text/plain">Neon was the one.</mattext>
                </material>
            </flow_mat>
        </itemfeedback>
        <solutionhint>
            <index>1</index>
            <points>1</points>
        </solutionhint>
    </item>
    <item ident="il_0_qst_102" title="Bonds" maxattempts="1">
        <itemmetadata>
            <qtimetadata/>
        </itemmetadata>
        <presentation label="Bonds">
            <flow>
                <material>
                    <mattext>Which bond shares electrons?</mattext>
                </material>
                <response_lid ident="MCMR" rcardinality="Multiple">
                    <render_choice shuffle="No">
                        <response_label ident="0">
                            <material>
                                <mattext>Covalent</mattext>
                            </material>
                        </response_label>
                        <response_label ident="1">
                            <material>
                                <mattext>Ionic</mattext>
                            </material>
                        </response_label>
                    </render_choice>
                </response_lid>
            </flow>
        </presentation>
        <resprocessing>
            <respcondition continue="No">
                <conditionvar>
                    <varequal respident="MCMR">0</varequal>
                </conditionvar>
                <setvar action="Add">1</setvar>
                <displayfeedback>
                    <feedbacktype>Response</feedbacktype>
                    <linkrefid>response_0</linkrefid>
                </displayfeedback>
            </respcondition>
        </resprocessing>
    </item>
</questestinterop>
""".encode("utf-8")


@pytest.fixture
def malformed_xml() -> bytes:
    """Malformed XML (unterminated element)."""
    return b"""<?xml version="1.0" encoding="utf-8"?>
<questestinterop>
    <item ident="broken">
"""


@pytest.fixture
def make_package(
    tmp_path: Path,
    sample_manifest_xml: bytes,
    sample_assessment_xml: bytes,
) -> Callable[..., Path]:
    """Build a package folder under tmp_path.

    Returns a factory taking an optional wrapper folder name and optional
    replacement document contents; it returns the root folder to pass to
    the locator.
    """

    def _make(
        wrapper: str | None = None,
        manifest: bytes | None = None,
        assessment: bytes | None = None,
    ) -> Path:
        root = tmp_path / "export"
        root.mkdir()
        folder = root / wrapper if wrapper else root
        folder.mkdir(exist_ok=True)
        (folder / "1234__qpl_56.xml").write_bytes(manifest or sample_manifest_xml)
        (folder / "1234__qti_56.xml").write_bytes(assessment or sample_assessment_xml)
        return root

    return _make
