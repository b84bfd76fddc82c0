"""
LNC Interpreter
===============

Stored-program interpreter for the 100-word decimal machine.

Visible state:
    - pc: program counter (0-99)
    - acc: accumulator (0-999)
    - neg_flag: set by sub when the true difference was negative,
      cleared by add
    - halted: terminal once set

Each step fetches ``memory[pc]``, advances pc, splits the word into its
opcode class (hundreds digit) and operand (last two digits) and
dispatches:

    1xx add   2xx sub   3xx sto   5xx lda
    6xx bra   7xx brz   8xx brp
    901 inp   902 out   000 hlt

Anything else raises UndefinedInstructionError. A failed step leaves
``halted`` untouched; callers treat the failure as fatal for the run.

Every dispatched instruction writes trace lines to the injected tracer
before and after its effect.

Example:
    >>> cpu = Interpreter(memory, QueueInput([3]), CaptureOutput())
    >>> steps = cpu.run()
    >>> print(f"pc={cpu.pc} acc={cpu.acc} halted={cpu.halted}")

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from lnc.assembler.opcodes import MEMORY_SIZE, WORD_LIMIT, split_word
from lnc.errors import UndefinedInstructionError
from lnc.machine.ports import InputPort, NullTracer, OutputPort, TraceLogger


@dataclass(frozen=True)
class MachineState:
    """
    Snapshot of the interpreter for introspection.

    Attributes:
        pc: Program counter
        acc: Accumulator
        neg_flag: Negative flag
        halted: Whether hlt has executed
        memory: Copy of all 100 cells
    """
    pc: int
    acc: int
    neg_flag: bool
    halted: bool
    memory: tuple[int, ...]


class Interpreter:
    """
    Fetch-decode-execute loop over a memory image.

    The interpreter works on its own copy of the image, so several
    interpreters can be built from one assembled program.
    """

    def __init__(
        self,
        memory: Sequence[int],
        input_port: InputPort,
        output_port: OutputPort,
        tracer: Optional[TraceLogger] = None,
    ):
        """
        Args:
            memory: The 100-word image to execute
            input_port: Supplies values for inp
            output_port: Receives values from out
            tracer: Receives trace lines (discarded if None)
        """
        if len(memory) != MEMORY_SIZE:
            raise ValueError(f"memory image must have {MEMORY_SIZE} cells, got {len(memory)}")

        self.memory: list[int] = list(memory)
        self.pc = 0
        self.acc = 0
        self.neg_flag = False
        self.halted = False

        self.input = input_port
        self.output = output_port
        self.tracer: TraceLogger = tracer or NullTracer()

        # class digit -> handler taking the operand
        self._address_ops: dict[int, Callable[[int], None]] = {
            1: self._add,
            2: self._sub,
            3: self._sto,
            5: self._lda,
            6: self._bra,
            7: self._brz,
            8: self._brp,
        }

    # ========================================
    # Introspection
    # ========================================

    @property
    def is_halted(self) -> bool:
        return self.halted

    def snapshot(self) -> MachineState:
        """Return an immutable copy of the full machine state."""
        return MachineState(self.pc, self.acc, self.neg_flag, self.halted, tuple(self.memory))

    def _log(self, message: str) -> None:
        self.tracer.log(message)

    # ========================================
    # Execution
    # ========================================

    def step(self) -> None:
        """
        Execute one instruction.

        A halted interpreter ignores the call (apart from a trace line)
        and never touches its ports.

        Raises:
            UndefinedInstructionError: If the fetched word is not an instruction
            InputError: If inp could not obtain a value
        """
        if self.halted:
            self._log("cannot step: interpreter is halted")
            return

        address = self.pc
        code = self.memory[address]
        self._log(f"fetched instruction {code:03d} at address {address:02d}")

        self.pc = (self.pc + 1) % MEMORY_SIZE
        opcode_class, operand = split_word(code)

        handler = self._address_ops.get(opcode_class)
        if handler is not None:
            handler(operand)
        elif code == 901:
            self._inp()
        elif code == 902:
            self._out()
        elif code == 0:
            self._hlt()
        else:
            raise UndefinedInstructionError(opcode_class, operand, address)

    def run(self) -> int:
        """
        Step until halted.

        There is no step limit: a program that never halts never returns.

        Returns:
            Number of instructions executed, including the final hlt
        """
        count = 0
        while not self.halted:
            self.step()
            count += 1
        return count

    # ========================================
    # Instruction Handlers
    # ========================================

    def _lda(self, addr: int) -> None:
        self._log(f"--> lda {addr:02d}")
        self.acc = self.memory[addr]
        self._log(f"    acc = {self.acc}")

    def _sto(self, addr: int) -> None:
        self._log(f"--> sto {addr:02d}")
        self.memory[addr] = self.acc
        self._log(f"    memory[{addr:02d}] = {self.acc}")

    def _add(self, addr: int) -> None:
        self._log(f"--> add {addr:02d}")
        value = self.memory[addr]
        total = self.acc + value
        if total >= WORD_LIMIT:
            self._log(f"    {self.acc} + {value} = {total} >= {WORD_LIMIT}: overflow")
        self.acc = total % WORD_LIMIT
        self.neg_flag = False
        self._log(f"    acc = {self.acc}")

    def _sub(self, addr: int) -> None:
        self._log(f"--> sub {addr:02d}")
        value = self.memory[addr]
        diff = self.acc - value
        self.neg_flag = diff < 0
        if self.neg_flag:
            self._log(f"    {self.acc} - {value} = {diff} < 0: underflow, neg_flag set")
        self.acc = diff % WORD_LIMIT
        self._log(f"    acc = {self.acc}")

    def _inp(self) -> None:
        self._log("--> inp")
        value = self.input.take()
        self._log(f"    {value} was input value")
        self.acc = value

    def _out(self) -> None:
        self._log("--> out")
        self.output.send(self.acc)
        self._log(f"    {self.acc} was output value")

    def _hlt(self) -> None:
        self._log("--> hlt")
        self.halted = True
        self._log("    halted")

    def _brz(self, addr: int) -> None:
        self._log(f"--> brz {addr:02d}")
        if self.acc == 0:
            self.pc = addr
            self._log(f"    acc is zero, pc = {addr:02d}")
        else:
            self._log("    acc is not zero, branch not taken")

    def _brp(self, addr: int) -> None:
        # zero counts as positive: only the negative flag is consulted
        self._log(f"--> brp {addr:02d}")
        if not self.neg_flag:
            self.pc = addr
            self._log(f"    neg_flag clear, pc = {addr:02d}")
        else:
            self._log("    neg_flag set, branch not taken")

    def _bra(self, addr: int) -> None:
        self._log(f"--> bra {addr:02d}")
        self.pc = addr
        self._log(f"    pc = {addr:02d}")


def execute(
    memory: Sequence[int],
    input_port: InputPort,
    output_port: OutputPort,
    tracer: Optional[TraceLogger] = None,
) -> int:
    """
    Run a memory image to completion against the given ports.

    Returns:
        Number of instructions executed

    Raises:
        MachineError: On the first failing step
    """
    return Interpreter(memory, input_port, output_port, tracer).run()
