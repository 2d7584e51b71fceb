"""CHIP-8 instruction decoding and disassembly."""

from chex import dataclass

from chip8core.constants import INSTRUCTION_SIZE, PROGRAM_START


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


_ALU_MNEMONICS = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR",
    0x4: "ADD", 0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}

_MISC_FORMATS = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def mnemonic(instruction: DecodedInstruction) -> str:
    """Render an instruction in assembly form, e.g. ``DRW V0, V1, 5``.

    Words that do not decode to a known instruction render as ``DW 0xNNNN``.
    """
    i = instruction
    if i.raw == 0x00E0:
        return "CLS"
    if i.raw == 0x00EE:
        return "RET"
    if i.opcode == 0x1:
        return f"JP 0x{i.nnn:03X}"
    if i.opcode == 0x2:
        return f"CALL 0x{i.nnn:03X}"
    if i.opcode == 0x3:
        return f"SE V{i.x:X}, 0x{i.nn:02X}"
    if i.opcode == 0x4:
        return f"SNE V{i.x:X}, 0x{i.nn:02X}"
    if i.opcode == 0x5 and i.n == 0:
        return f"SE V{i.x:X}, V{i.y:X}"
    if i.opcode == 0x6:
        return f"LD V{i.x:X}, 0x{i.nn:02X}"
    if i.opcode == 0x7:
        return f"ADD V{i.x:X}, 0x{i.nn:02X}"
    if i.opcode == 0x8 and i.n in _ALU_MNEMONICS:
        if i.n in (0x6, 0xE):
            return f"{_ALU_MNEMONICS[i.n]} V{i.x:X}"
        return f"{_ALU_MNEMONICS[i.n]} V{i.x:X}, V{i.y:X}"
    if i.opcode == 0x9 and i.n == 0:
        return f"SNE V{i.x:X}, V{i.y:X}"
    if i.opcode == 0xA:
        return f"LD I, 0x{i.nnn:03X}"
    if i.opcode == 0xB:
        return f"JP V0, 0x{i.nnn:03X}"
    if i.opcode == 0xC:
        return f"RND V{i.x:X}, 0x{i.nn:02X}"
    if i.opcode == 0xD:
        return f"DRW V{i.x:X}, V{i.y:X}, {i.n}"
    if i.opcode == 0xE and i.nn == 0x9E:
        return f"SKP V{i.x:X}"
    if i.opcode == 0xE and i.nn == 0xA1:
        return f"SKNP V{i.x:X}"
    if i.opcode == 0xF and i.nn in _MISC_FORMATS:
        return _MISC_FORMATS[i.nn].format(x=i.x)
    return f"DW 0x{i.raw:04X}"


def disassemble(program: bytes, start: int = PROGRAM_START) -> list[tuple[int, int, str]]:
    """Disassemble a program image word by word.

    Args:
        program: Raw program bytes
        start: Address the first byte is loaded at

    Returns:
        List of ``(address, instruction, mnemonic)`` tuples. A trailing odd
        byte is padded with zero.
    """
    data = bytes(program)
    listing = []
    for offset in range(0, len(data), INSTRUCTION_SIZE):
        high = data[offset]
        low = data[offset + 1] if offset + 1 < len(data) else 0
        word = (high << 8) | low
        listing.append((start + offset, word, mnemonic(decode(word))))
    return listing
