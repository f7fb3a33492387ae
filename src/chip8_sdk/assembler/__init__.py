"""
CHIP-8 Assembler
================

This module provides a complete assembler for the CHIP-8 virtual machine.

The assembler converts CHIP-8 assembly source (.c8a) into a flat binary
program image (.c8) that interpreters load at address $200.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **Lexer**: Tokenizes assembly source into tokens
- **Parser**: Groups tokens into statements and validates operands
- **Resolver**: Assigns addresses and resolves label references
- **Encoder**: Packs each statement into bytes
- **CodeGenerator**: Runs both resolver passes and emits the image

Assembly Process
----------------
1. **Lexing**: Tokenize source into lexical tokens
2. **Parsing**: One statement per line (instruction, label or literal),
   each instruction checked against the form table
3. **Code Generation** (two-pass):
   - Pass 1: Address assignment, label table
   - Pass 2: Label resolution and encoding
   - Emission: Concatenate and check the image fits in memory

Example Usage
-------------
>>> from chip8_sdk.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
... _loop:
...     ADD V0, #1
...     JMP _loop
... ''')
b'p\\x01\\x12\\x00'
>>> asm.get_symbols()
{'_loop': 512}
"""

from chip8_sdk.assembler.assembler import Assembler, assemble, assemble_file
from chip8_sdk.assembler.lexer import Lexer, Token, TokenType
from chip8_sdk.assembler.parser import (
    Parser,
    Statement,
    Instruction,
    LabelDef,
    Literal,
    Register,
    IndexRegister,
    Immediate,
    LabelRef,
    parse_source,
)
from chip8_sdk.assembler.resolver import (
    LabelTable,
    ResolverContext,
    assign_addresses,
    resolve_references,
)
from chip8_sdk.assembler.encoder import encode_instruction, encode_statement
from chip8_sdk.assembler.codegen import AssemblyPhase, BinaryImage, CodeGenerator

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    "AssemblyPhase",
    "BinaryImage",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    # Parser
    "Parser",
    "Statement",
    "Instruction",
    "LabelDef",
    "Literal",
    "Register",
    "IndexRegister",
    "Immediate",
    "LabelRef",
    "parse_source",
    # Resolver
    "LabelTable",
    "ResolverContext",
    "assign_addresses",
    "resolve_references",
    # Encoder
    "encode_instruction",
    "encode_statement",
    # Code generator
    "CodeGenerator",
]
