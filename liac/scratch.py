"""
Data model for the blocks of a Scratch 3 project.json

A ScratchTarget owns every block created for it and hands out the block ids,
so one target corresponds to exactly one compilation.
"""

import json
import uuid

def randomId():
    """ 128 random bits as 32 hex characters """
    return uuid.uuid4().hex

class BlockInput:
    def __init__(self, inputName: str, value, noShadow=False):
        """ From the Scratch wiki:

        An object associating names with arrays representing inputs into which reporters may be dropped and C mouths.
        The first element of each array [BlockInput.shadow] is 1 if the input is a shadow, 2 if there is no shadow.
        The second [BlockInput.value] is either the ID of the input or an array representing it as described below.
        LIA never drops reporters into inputs, so obscured shadows (3) are not produced

        C mouths (SUBSTACK) have no shadow, their value is the id of the first block inside or None
        """
        self.inputName = inputName

        self.value = value
        self.noShadow = noShadow

    @property
    def shadow(self):
        return 2 if self.noShadow else 1

    def linkedValue(self, target):
        """ Return the block referenced by self.value, None for an empty C mouth """
        assert self.noShadow, Exception("Input does not reference a block")
        return target.getBlock(self.value)

    # BlockInput represents a key/value pair, where the key is BlockInput.inputName
    def serializeValue(self):
        """ Output a value of type [T, value] where value is either an ID or another, typed value """
        return [self.shadow, self.value]

    def __repr__(self):
        return f"<Input \"{self.inputName}\">"

class BlockField:
    def __init__(self, name, value, varId=None):
        self.fieldName = name
        self.value = value
        self.varId = varId

    def serializeValue(self):
        return [self.value, self.varId]

    def __repr__(self):
        return f"<Field \"{self.fieldName}\": {repr(self.value)}>"

class Block:
    def __init__(self, target, id: str):
        self.target = target
        self.id = id
        self.opcode = None
        self.inputs: list[BlockInput] = []
        self.fields: list[BlockField] = []
        self.shadow = False
        self.parentId = None
        self.nextId = None
        self.x = None
        self.y = None

    def inputByName(self, name):
        for input in self.inputs:
            if input.inputName == name:
                return input

    def fieldByName(self, name):
        for field in self.fields:
            if field.fieldName == name:
                return field

    def getNextBlock(self):
        return self.target.getBlock(self.nextId)

    def getParentBlock(self):
        return self.target.getBlock(self.parentId)

    def _serializeInputs(self):
        return {input.inputName: input.serializeValue() for input in self.inputs}

    def _serializeFields(self):
        return {field.fieldName: field.serializeValue() for field in self.fields}

    def serialize(self, topLevel=None):
        """ [topLevel] is looked up on the target unless the caller already knows it """
        if topLevel == None:
            topLevel = self.target.isTopLevel(self.id)

        baseData = {
            "opcode": self.opcode,
            "inputs": self._serializeInputs(),
            "fields": self._serializeFields(),
            "shadow": self.shadow,
            "topLevel": topLevel,
            "parent": self.parentId,
            "next": self.nextId
        }
        # only script roots carry a position on the canvas
        if self.x != None and self.y != None:
            baseData.update({
                "x": self.x,
                "y": self.y
            })
        return baseData

    def __repr__(self):
        return json.dumps(self.serialize(), indent=4)

class ScratchTarget:
    """ The stage or a sprite. LIA programs only ever fill in a single stage target """
    def __init__(self, name="Stage", isStage=True):
        self.name = name
        self.isStage = isStage
        self._blocks: dict[str, Block] = {}
        self.variables = {}
        self.lists = {}
        self.broadcasts: dict[str, str] = {}
        self.comments = {}
        self.currentCostume = 0
        self.costumes = []
        self.sounds = []
        self.volume = 100
        self.layerOrder = 0

        # stage only
        self.tempo = 60
        self.videoTransparency = 50
        self.videoState = "on"
        self.textToSpeechLanguage = None

    def getBlocks(self):
        return list(self._blocks.values())

    def getBlock(self, id) -> Block:
        return self._blocks.get(id, None)

    def _newBlockId(self):
        newId = randomId()
        while newId in self._blocks:
            newId = randomId()
        return newId

    def createBlock(self, opcode=None):
        newBlock = Block(self, self._newBlockId())
        newBlock.opcode = opcode
        self._blocks[newBlock.id] = newBlock
        return newBlock

    def _referencedIds(self):
        """ Ids that some other block points at through next or a C mouth """
        referenced = set()
        for block in self._blocks.values():
            if block.nextId != None:
                referenced.add(block.nextId)
            for input in block.inputs:
                if input.noShadow and input.value != None:
                    referenced.add(input.value)
        return referenced

    def isTopLevel(self, id):
        """ A block starts a script when nothing chains to it and no C mouth holds it """
        return id not in self._referencedIds()

    def serializeBlocks(self):
        referenced = self._referencedIds()
        return {block.id: block.serialize(topLevel=block.id not in referenced) for block in self._blocks.values()}

    # return json-serializable copy of this target for a project.json file
    def serialize(self):
        baseData = {
            "name": self.name,
            "isStage": self.isStage,
            "variables": self.variables,
            "lists": self.lists,
            "broadcasts": self.broadcasts,
            "blocks": self.serializeBlocks(),
            "comments": self.comments,
            "sounds": self.sounds,
            "costumes": self.costumes,
            "currentCostume": self.currentCostume,
            "volume": self.volume,
            "layerOrder": self.layerOrder
        }

        if self.isStage:
            baseData.update({
                "tempo": self.tempo,
                "videoTransparency": self.videoTransparency,
                "videoState": self.videoState,
                "textToSpeechLanguage": self.textToSpeechLanguage
            })

        return baseData

    def __len__(self):
        return len(self._blocks)

    def __repr__(self):
        return json.dumps(self.serialize(), indent=4)
