import hashlib
import io
import json
import zipfile

from liac.build import (EMPTY_BACKDROP_SVG, ProjectParameters, buildProjectJSON, exportLia, exportSB3,
                        placeholderBackdrop, serialize)
from liac.compiler import compileSource
from liac.parser import parseSource

SOURCE = "on click;\nloop { move(10); }\n"


def readArchive(data):
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


def test_project_json_layout():
    compiled = compileSource(SOURCE)
    project = buildProjectJSON(compiled, ProjectParameters(agent="tests"))

    assert project["meta"] == {"semver": "3.0.0", "vm": "0.2.0", "agent": "tests"}
    assert project["monitors"] == []
    assert project["extensions"] == []

    [stage] = project["targets"]
    assert stage["isStage"] is True
    assert stage["name"] == "Stage"
    assert stage["variables"] == {} and stage["lists"] == {} and stage["broadcasts"] == {}
    assert stage["tempo"] == 60
    assert stage["videoTransparency"] == 50
    assert set(stage["blocks"]) == set(compiled.blocks)


def test_placeholder_backdrop_costume():
    digest = hashlib.md5(EMPTY_BACKDROP_SVG).hexdigest()
    project = buildProjectJSON(compileSource(SOURCE))

    assert project["targets"][0]["costumes"] == [{
        "name": "backdrop1",
        "assetId": digest,
        "md5ext": digest + ".svg",
        "dataFormat": "svg",
        "rotationCenterX": 240,
        "rotationCenterY": 180,
    }]


def test_serialize_archive_contents():
    compiled = compileSource(SOURCE)
    files = readArchive(serialize(compiled))

    backdrop = placeholderBackdrop()
    assert set(files) == {"project.json", backdrop.md5ext}
    assert files[backdrop.md5ext] == EMPTY_BACKDROP_SVG

    project = json.loads(files["project.json"])
    blocks = project["targets"][0]["blocks"]
    opcodes = sorted(block["opcode"] for block in blocks.values())
    assert opcodes == sorted([
        "event_whenthisspriteclicked", "event_whenflagclicked", "event_whenthisspriteclicked",
        "control_forever", "motion_movesteps",
    ])


def test_pretty_project_json():
    compiled = compileSource(SOURCE)
    files = readArchive(serialize(compiled, ProjectParameters(prettyProjectJSON=True)))
    assert files["project.json"].startswith(b"{\n    ")


def test_stage_name_parameter():
    compiled = compileSource(SOURCE)
    project = buildProjectJSON(compiled, ProjectParameters(stageName="Backdrop Stage"))
    assert project["targets"][0]["name"] == "Backdrop Stage"


def test_export_sb3(tmp_path):
    compiled = compileSource(SOURCE)
    out = tmp_path / "out.sb3"
    exportSB3(compiled, str(out))

    assert zipfile.is_zipfile(out)
    assert "project.json" in readArchive(out.read_bytes())


def test_export_lia(tmp_path):
    program = parseSource(SOURCE)
    out = tmp_path / "out.lia"
    exportLia(program, str(out))

    assert json.loads(out.read_text(encoding="utf-8")) == program.toDict()


def test_build_leaves_compiled_target_alone():
    compiled = compileSource(SOURCE)
    buildProjectJSON(compiled, ProjectParameters(stageName="Backdrop Stage"))

    assert compiled.target.name == "Stage"
    assert compiled.target.costumes == []


def test_export_lia_writes_utf8(tmp_path):
    program = parseSource('say("héllo wörld");')
    out = tmp_path / "out.lia"
    exportLia(program, str(out))

    assert "héllo wörld" in out.read_bytes().decode("utf-8")
