import pytest

from pacesim.bits import bytes_to_binary_str, read_binary_prog_file
from pacesim.configuration import Configuration, Program, parse_configuration
from pacesim.operation import OpCode, Operation
from pacesim.router import DirectionsOpt, RouterConfig, RouterInDir, RouterSwitchConfig

FULL_CONFIG = """operation: ADD! 15
            switch_config: {
            Open -> predicate,
            SouthIn -> south_out,
            WestIn -> west_out,
            NorthIn -> north_out,
            EastIn -> east_out,
            ALURes -> alu_op2,
            ALUOut -> alu_op1,
        };
        input_register_used: {north, south};
        input_register_write: {east, west};"""

ADD_CONFIG = """operation: ADD
switch_config: {
    Open -> predicate,
    ALUOut -> south_out,
    Open -> west_out,
    Open -> north_out,
    Open -> east_out,
    Open -> alu_op2,
    Open -> alu_op1,
};
input_register_used: {};
input_register_write: {};
"""

NOP_INDENTED = """operation: NOP
                                           switch_config: {
                                               Open -> predicate,
                                               Open -> south_out,
                                               Open -> west_out,
                                               Open -> north_out,
                                               ALUOut -> east_out,
                                               EastIn -> alu_op2,
                                               SouthIn -> alu_op1,
                                           };
                                           input_register_used: {};
                                           input_register_write: {};
                                           """

PROGRAM = """operation: NOP 
switch_config: {
    Open -> predicate,
    Open -> south_out,
    Open -> west_out,
    Open -> north_out,
    ALUOut -> east_out,
    EastIn -> alu_op2,
    SouthIn -> alu_op1,
};
input_register_used: {};
input_register_write: {};

operation: ADD 
switch_config: {
    Open -> predicate,
    ALUOut -> south_out,
    Open -> west_out,
    Open -> north_out,
    Open -> east_out,
    WestIn -> alu_op2,
    NorthIn -> alu_op1,
};
input_register_used: {};
input_register_write: {};

operation: SUB 
switch_config: {
    Open -> predicate,
    Open -> south_out,
    ALUOut -> west_out,
    Open -> north_out,
    Open -> east_out,
    EastIn -> alu_op2,
    SouthIn -> alu_op1,
};
input_register_used: {};
input_register_write: {};

operation: MULT 
switch_config: {
    Open -> predicate,
    Open -> south_out,
    Open -> west_out,
    ALUOut -> north_out,
    Open -> east_out,
    WestIn -> alu_op2,
    NorthIn -> alu_op1,
};
input_register_used: {};
input_register_write: {};

operation: MULT 
switch_config: {
    Open -> predicate,
    Open -> south_out,
    Open -> west_out,
    Open -> north_out,
    ALUOut -> east_out,
    EastIn -> alu_op2,
    SouthIn -> alu_op1,
};
input_register_used: {};
input_register_write: {};

operation: ADD 
switch_config: {
    Open -> predicate,
    ALUOut -> south_out,
    Open -> west_out,
    Open -> north_out,
    Open -> east_out,
    WestIn -> alu_op2,
    NorthIn -> alu_op1,
};
input_register_used: {};
input_register_write: {};"""


def test_parse_configuration_full():
    configuration = Configuration.from_mnemonics(FULL_CONFIG)
    assert configuration.operation == Operation(OpCode.ADD, immediate=15, update_res=True)
    assert configuration.router_config.switch_config == RouterSwitchConfig(
        predicate=RouterInDir.OPEN,
        alu_op1=RouterInDir.ALU_OUT,
        alu_op2=RouterInDir.ALU_RES,
        east_out=RouterInDir.EAST_IN,
        south_out=RouterInDir.SOUTH_IN,
        west_out=RouterInDir.WEST_IN,
        north_out=RouterInDir.NORTH_IN,
    )
    assert configuration.router_config.input_register_used == DirectionsOpt(
        north=True, south=True
    )
    assert configuration.router_config.input_register_write == DirectionsOpt(
        east=True, west=True
    )


def test_parse_configuration_indented_nop():
    configuration = Configuration.from_mnemonics(NOP_INDENTED)
    assert configuration.operation == Operation(OpCode.NOP)
    assert configuration.router_config.switch_config.east_out is RouterInDir.ALU_OUT
    assert configuration.router_config.switch_config.alu_op1 is RouterInDir.SOUTH_IN


def test_program_mnemonic_roundtrip():
    program = Program.from_mnemonics(PROGRAM)
    assert len(program.configurations) == 6
    assert program.to_mnemonics() == PROGRAM


def test_configuration_binary_roundtrip_full():
    configuration = Configuration.from_mnemonics(FULL_CONFIG)
    binary = configuration.to_binary()
    assert len(binary) == 8
    assert Configuration.from_binary(binary) == configuration


def test_configuration_binary_roundtrip_add():
    configuration = Configuration.from_mnemonics(ADD_CONFIG)
    assert configuration.operation == Operation(
        OpCode.ADD, immediate=None, update_res=False, loop_start=None, loop_end=None
    )
    assert Configuration.from_binary(configuration.to_binary()) == configuration


def test_all_open_nop_encoding():
    configuration = Configuration(Operation(OpCode.NOP), RouterConfig())
    assert configuration.to_u64() == 0x1FFFFF
    assert configuration.to_binary() == bytes([0xFF, 0xFF, 0x1F, 0, 0, 0, 0, 0])


def test_program_binary_roundtrip():
    program = Program.from_mnemonics(PROGRAM)
    binary = program.to_binary()
    assert len(binary) == 6 * 8
    assert Program.from_binary(binary) == program


def test_program_from_binary_prog_file(tmp_path):
    program = Program.from_mnemonics(PROGRAM)
    text = bytes_to_binary_str(program.to_binary())
    lines = "\n".join(text[i:i + 64] for i in range(0, len(text), 64))
    path = tmp_path / "prog.binprog"
    path.write_text(lines + "\n", encoding="utf-8")
    assert Program.from_binary(read_binary_prog_file(path)) == program


def test_parse_configuration_returns_remainder():
    configuration, rest = parse_configuration(ADD_CONFIG + "trailing")
    assert rest == "trailing"
    assert configuration.operation.op_code is OpCode.ADD


def test_configuration_with_trailing_text_rejected():
    with pytest.raises(ValueError):
        Configuration.from_mnemonics(ADD_CONFIG + "garbage")


def test_program_with_trailing_text_rejected():
    with pytest.raises(ValueError):
        Program.from_mnemonics(PROGRAM + "\n\nnot a configuration")


def test_empty_program():
    assert Program.from_mnemonics("  \n ").configurations == []
    assert Program.from_binary(b"").configurations == []


def test_program_binary_bad_length():
    with pytest.raises(ValueError):
        Program.from_binary(bytes(12))


def test_configuration_binary_bad_length():
    with pytest.raises(ValueError):
        Configuration.from_binary(bytes(7))