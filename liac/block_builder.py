""" A set of utility functions for creating Scratch block inputs and fields """

from . import scratch

NUMBER = 4
STRING = 10

def makeNumberInput(inputName, value):
    return scratch.BlockInput(inputName, [NUMBER, value])

def makeTextInput(inputName, text):
    return scratch.BlockInput(inputName, [STRING, text])

def makeConditionInput(inputName, condition):
    # conditions stay opaque text, there is no reporter block behind them
    return makeTextInput(inputName, condition)

def makeSubstackInput(inputName, firstBlockId):
    """ [firstBlockId] is None when the body is empty """
    return scratch.BlockInput(inputName, firstBlockId, noShadow=True)

def makeTextField(fieldName, value):
    return scratch.BlockField(fieldName, value)
