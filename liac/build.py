""" Project assembly and export: turns compiled blocks into a project.json and an sb3 archive """

import hashlib
import io
import json
import logging
import zipfile

logger = logging.getLogger(__name__)

EMPTY_BACKDROP_SVG = b'<svg xmlns="http://www.w3.org/2000/svg" width="480" height="360"></svg>'

class ProjectParameters:
    """ Parameters for the generated Scratch project """
    def __init__(self, stageName="Stage", agent="liac", prettyProjectJSON=False,
                 columnSpacing=500, rowSpacing=1000, maxColumns=5):
        self.stageName = stageName
        self.agent = agent                          # written to meta.agent
        self.prettyProjectJSON = prettyProjectJSON  # indent project.json inside the archive
        # script roots are placed on a grid, maxColumns per row
        self.columnSpacing = columnSpacing
        self.rowSpacing = rowSpacing
        self.maxColumns = maxColumns

    @staticmethod
    def default():
        return ProjectParameters()

class ScratchAsset:
    def __init__(self, name, dataFormat, data: bytes):
        self.name = name
        self.dataFormat = dataFormat
        self.data = data

    @property
    def assetId(self):
        return hashlib.md5(self.data).hexdigest()

    @property
    def md5ext(self):
        return f"{self.assetId}.{self.dataFormat}"

    def costumeEntry(self, rotationCenterX, rotationCenterY):
        return {
            "name": self.name,
            "assetId": self.assetId,
            "md5ext": self.md5ext,
            "dataFormat": self.dataFormat,
            "rotationCenterX": rotationCenterX,
            "rotationCenterY": rotationCenterY
        }

def placeholderBackdrop():
    return ScratchAsset("backdrop1", "svg", EMPTY_BACKDROP_SVG)

def buildProjectJSON(compiled, params: ProjectParameters = None):
    """ Return the project.json document for [compiled], a CompiledProgram """
    params = params or ProjectParameters.default()

    # the compiled target itself stays untouched
    stageData = compiled.target.serialize()
    stageData["name"] = params.stageName
    stageData["costumes"] = [placeholderBackdrop().costumeEntry(240, 180)]

    return {
        "targets": [stageData],
        "monitors": [],
        "extensions": [],
        "meta": {"semver": "3.0.0", "vm": "0.2.0", "agent": params.agent}
    }

def serialize(compiled, params: ProjectParameters = None) -> bytes:
    """ Build the sb3 archive for [compiled] in memory """
    params = params or ProjectParameters.default()
    project = buildProjectJSON(compiled, params)
    backdrop = placeholderBackdrop()

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        if params.prettyProjectJSON:
            zf.writestr("project.json", json.dumps(project, indent=4, sort_keys=True))
        else:
            zf.writestr("project.json", json.dumps(project))
        zf.writestr(backdrop.md5ext, backdrop.data)

    data = buffer.getvalue()
    logger.debug("built sb3 archive: %d bytes, %d blocks", len(data), len(compiled))
    return data

def exportSB3(compiled, destination, params: ProjectParameters = None):
    data = serialize(compiled, params)
    with open(destination, "wb") as fl:
        fl.write(data)

def exportLia(program, destination):
    """ Write the program tree as JSON (a .lia file) """
    with open(destination, "w", encoding="utf-8") as fl:
        json.dump(program.toDict(), fl, indent=2, ensure_ascii=False)
