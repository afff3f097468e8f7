import logging
from . import LIAAwaitUntil, LIACall, LIAEmpty, LIAEvent, LIAIf, LIALoop, LIAProgram, LIARepeat
from . import scratch
from .block_builder import makeConditionInput, makeNumberInput, makeSubstackInput, makeTextField, makeTextInput
from .build import ProjectParameters
from .parser import parseSource

logger = logging.getLogger(__name__)

EVENT_OPCODES = {
    "start": "event_whenflagclicked",
    "click": "event_whenthisspriteclicked",
    "backdrop": "event_whenbackdropswitchesto"
}

TURN_OPCODES = {
    "right": "motion_turnright",
    "lef": "motion_turnleft",
    "left": "motion_turnleft"
}

class CompilationContext:
    """ Everything one compilation writes to: the target that owns the blocks, and the list of script roots """
    def __init__(self, params: ProjectParameters):
        self.params = params
        self.target = scratch.ScratchTarget(params.stageName)
        self.scriptRoots: list[str] = []

    def addScriptRoot(self, block: scratch.Block):
        # lay hats out in a grid so the scripts don't overlap in the editor
        col = len(self.scriptRoots) % self.params.maxColumns
        row = len(self.scriptRoots) // self.params.maxColumns
        block.x = col * self.params.columnSpacing
        block.y = row * self.params.rowSpacing

        self.scriptRoots.append(block.id)

class CompiledProgram:
    """ The instruction graph (block id -> Block) plus the ids of the blocks that start a script """
    def __init__(self, target: scratch.ScratchTarget, scriptRoots):
        self.target = target
        self.scriptRoots = scriptRoots

    @property
    def blocks(self) -> "dict[str, scratch.Block]":
        return {block.id: block for block in self.target.getBlocks()}

    def getBlock(self, id) -> scratch.Block:
        return self.target.getBlock(id)

    def findBlocks(self, opcode):
        return [block for block in self.target.getBlocks() if block.opcode == opcode]

    def serializeBlocks(self):
        return self.target.serializeBlocks()

    def __len__(self):
        return len(self.target)

class LIACompiler:
    def __init__(self, program: LIAProgram, params: ProjectParameters = None):
        """
        Lowers a LIA program tree into linked Scratch blocks. Each statement becomes at most one block,
        statement lists become chains linked through Block.nextId, and the bodies of repeat/loop/if
        hang off their container's SUBSTACK input
        """
        self.program = program
        self.context = CompilationContext(params or ProjectParameters.default())
        self.target = self.context.target

        self._statementCompilers = {
            LIAEvent: self.compileEvent,
            LIARepeat: self.compileRepeat,
            LIALoop: self.compileLoop,
            LIAIf: self.compileIf,
            LIAAwaitUntil: self.compileAwaitUntil,
            LIACall: self.compileCall,
            LIAEmpty: self.compileEmpty
        }

        self._callCompilers = {
            "move": self.compileMove,
            "turn": self.compileTurn,
            "say": self.compileSay,
            "wait": self.compileWait
        }

    def createBlock(self, opcode, inputs=None, fields=None):
        block = self.target.createBlock(opcode)
        block.inputs = inputs or []
        block.fields = fields or []
        return block

    def compileStatement(self, stmt):
        """ Compile a single statement. Returns the new block, or None if the statement produces no block """
        statementCompiler = self._statementCompilers.get(type(stmt))
        if not statementCompiler:
            raise TypeError(f"Unhandled statement type {type(stmt).__name__}")
        return statementCompiler(stmt)

    def compileStatements(self, statements):
        """ Compile a statement list into a chain of blocks. Returns the ids of the first and last block (or None, None) """
        firstId = None
        previous = None

        for stmt in statements:
            block = self.compileStatement(stmt)
            if not block:
                continue

            if previous:
                previous.nextId = block.id
            else:
                firstId = block.id
            previous = block

        return firstId, (previous.id if previous else None)

    def compileContainer(self, opcode, body, inputs):
        # the body has to exist before the container so SUBSTACK can point at it,
        # the body's first block gets its parent afterwards
        firstId, _ = self.compileStatements(body)

        container = self.createBlock(opcode, inputs + [makeSubstackInput("SUBSTACK", firstId)])
        if firstId:
            self.target.getBlock(firstId).parentId = container.id

        return container

    # Statements

    def compileEvent(self, stmt: LIAEvent):
        if stmt.kind == "key":
            logger.debug('no block for "on key(%s)", skipping it', stmt.key)
            return None

        hat = self.createBlock(EVENT_OPCODES[stmt.kind])
        if stmt.kind == "backdrop":
            hat.fields = [makeTextField("BACKDROP", stmt.name)]
        return hat

    def compileRepeat(self, stmt: LIARepeat):
        return self.compileContainer("control_repeat", stmt.body, [makeNumberInput("TIMES", stmt.count)])

    def compileLoop(self, stmt: LIALoop):
        return self.compileContainer("control_forever", stmt.body, [])

    def compileIf(self, stmt: LIAIf):
        if stmt.alternate != None:
            logger.debug("else branch of if (%s) is not compiled", stmt.condition)

        return self.compileContainer("control_if", stmt.consequent, [makeConditionInput("CONDITION", stmt.condition)])

    def compileAwaitUntil(self, stmt: LIAAwaitUntil):
        return self.createBlock("control_wait_until", [makeConditionInput("CONDITION", stmt.condition)])

    def compileEmpty(self, stmt: LIAEmpty):
        return None

    def compileCall(self, stmt: LIACall):
        callCompiler = self._callCompilers.get(stmt.name)
        if callCompiler:
            return callCompiler(stmt)

        logger.debug('unhandled call "%s", emitting procedures_call', stmt.name)
        return self.createBlock("procedures_call")

    # Calls. Defaults only apply when the argument is missing

    def compileMove(self, stmt: LIACall):
        steps = stmt.args[0] if stmt.args else 10
        return self.createBlock("motion_movesteps", [makeNumberInput("STEPS", steps)])

    def compileTurn(self, stmt: LIACall):
        direction = stmt.args[0] if stmt.args else None
        amount = stmt.args[1] if len(stmt.args) > 1 else 15

        opcode = TURN_OPCODES.get(direction)
        if not opcode:
            logger.debug("unknown turn direction %r, skipping it", direction)
            return None

        return self.createBlock(opcode, [makeNumberInput("DEGREES", amount)])

    def compileSay(self, stmt: LIACall):
        text = stmt.args[0] if stmt.args else ""

        if stmt.forCount != None:
            return self.createBlock("looks_sayforsecs", [
                makeTextInput("MESSAGE", text),
                makeNumberInput("SECS", stmt.forCount)
            ])
        return self.createBlock("looks_say", [makeTextInput("MESSAGE", text)])

    def compileWait(self, stmt: LIACall):
        duration = stmt.args[0] if stmt.args else 1
        return self.createBlock("control_wait", [makeNumberInput("DURATION", duration)])

    # Program

    def compileProgram(self):
        """
        Every top-level event becomes its own hat with nothing attached. The first top-level statement
        that is not an event makes a green flag hat and the whole top-level list (events included)
        is chained below it, after which compilation stops
        """
        for node in self.program.body:
            if type(node) == LIAEvent:
                hat = self.compileEvent(node)
                if hat:
                    self.context.addScriptRoot(hat)
                continue

            startHat = self.createBlock("event_whenflagclicked")
            self.context.addScriptRoot(startHat)

            firstId, _ = self.compileStatements(self.program.body)
            if firstId:
                startHat.nextId = firstId
            break

        logger.debug("compiled %d blocks in %d scripts", len(self.target), len(self.context.scriptRoots))
        return CompiledProgram(self.target, self.context.scriptRoots)

def lower(program: LIAProgram, params: ProjectParameters = None) -> CompiledProgram:
    return LIACompiler(program, params).compileProgram()

def compileSource(text, params: ProjectParameters = None) -> CompiledProgram:
    return lower(parseSource(text), params)
