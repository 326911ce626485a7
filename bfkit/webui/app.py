from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException, Response, status
from pydantic import BaseModel, Field

from bfkit.bf_interpreter import BrainfuckInterpreter, StepLimitExceeded, Tape
from bfkit.c_generator import generate_c
from bfkit.config import DEFAULT_MEM_SIZE, Config
from bfkit.errors import BrainfuckError, ConfigurationError
from bfkit.keyboard import input_reader, to_input_bytes
from bfkit.optimizer import optimize
from bfkit.source import prepare

from .session import SessionRecord, SessionStore

DEFAULT_MAX_STEPS = 1_000_000
MAX_STEPS_CAP = 50_000_000
MAX_MEM_SIZE = 1_000_000


class ProgramOptions(BaseModel):
    mem_size: int = Field(default=DEFAULT_MEM_SIZE, ge=1, le=MAX_MEM_SIZE)
    offset: int = Field(default=0, ge=0, lt=MAX_MEM_SIZE)
    debug: bool = False
    verbose: bool = False
    max_steps: int = Field(default=DEFAULT_MAX_STEPS, ge=1, le=MAX_STEPS_CAP)

    def to_config(self, **overrides) -> Config:
        return Config(
            mem_size=self.mem_size,
            offset=self.offset,
            debug=self.debug,
            verbose=self.verbose,
            max_steps=self.max_steps,
            **overrides,
        ).validate()


class TapeCell(BaseModel):
    index: int
    value: int


class InterpretRequest(ProgramOptions):
    code: str
    input: str = ""


class InterpretResponse(BaseModel):
    output: str
    pointer: int
    tape: List[TapeCell]


class TranspileRequest(ProgramOptions):
    code: str
    release: bool = False


class TranspileResponse(BaseModel):
    source: str
    token_count: int


class SessionPayload(BaseModel):
    session_id: str
    mem_size: int
    offset: int
    pointer: int
    tape: List[TapeCell]
    evaluations: int


class EvalRequest(BaseModel):
    code: str
    input: str = ""


class EvalResponse(BaseModel):
    session_id: str
    output: str
    error: Optional[str] = None
    pointer: int
    tape: List[TapeCell]
    evaluations: int


def _tape_cells(tape: Tape, mem_size: int) -> List[TapeCell]:
    return [TapeCell(index=index, value=value) for index, value in tape.window(mem_size)]


def _config_or_422(options: ProgramOptions, **overrides) -> Config:
    try:
        return options.to_config(**overrides)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


def create_app(store: Optional[SessionStore] = None) -> FastAPI:
    session_store = store or SessionStore()
    app = FastAPI(title="bfkit API", version="0.1.0")

    def _get_record(session_id: str) -> SessionRecord:
        try:
            return session_store.get(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    def _build_payload(record: SessionRecord) -> SessionPayload:
        session = record.session
        return SessionPayload(
            session_id=record.session_id,
            mem_size=session.config.mem_size,
            offset=session.config.offset,
            pointer=session.tape.pointer,
            tape=_tape_cells(session.tape, session.config.mem_size),
            evaluations=session.evaluations,
        )

    @app.post("/api/interpret", response_model=InterpretResponse)
    def interpret(payload: InterpretRequest) -> InterpretResponse:
        config = _config_or_422(payload)
        interpreter = BrainfuckInterpreter.from_config(config, read_key=input_reader([]))
        tape = interpreter.new_tape()
        try:
            code = prepare(payload.code, verbose=config.verbose)
            output = interpreter.execute(
                code,
                tape,
                input_data=to_input_bytes(payload.input),
                max_steps=config.max_steps,
            )
        except StepLimitExceeded as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
        except BrainfuckError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc
        return InterpretResponse(
            output=output,
            pointer=tape.pointer,
            tape=_tape_cells(tape, config.mem_size),
        )

    @app.post("/api/transpile", response_model=TranspileResponse)
    def transpile(payload: TranspileRequest) -> TranspileResponse:
        config = _config_or_422(payload, release=payload.release)
        try:
            code = prepare(payload.code, verbose=config.verbose)
            tokens = optimize(code)
            source = generate_c(
                tokens,
                debug=config.debug_codegen,
                mem_size=config.mem_size,
                offset=config.offset,
            )
        except BrainfuckError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc
        return TranspileResponse(source=source, token_count=len(tokens))

    @app.post("/api/session", response_model=SessionPayload, status_code=status.HTTP_201_CREATED)
    def create_session(payload: ProgramOptions) -> SessionPayload:
        record = session_store.create_session(_config_or_422(payload))
        return _build_payload(record)

    @app.get("/api/session/{session_id}", response_model=SessionPayload)
    def get_session(session_id: str) -> SessionPayload:
        return _build_payload(_get_record(session_id))

    @app.post("/api/session/{session_id}/eval", response_model=EvalResponse)
    def eval_session(session_id: str, payload: EvalRequest) -> EvalResponse:
        record = _get_record(session_id)
        session = record.session
        error: Optional[str] = None
        with record.lock:
            try:
                session.evaluate(payload.code, input_data=to_input_bytes(payload.input))
            except StepLimitExceeded as exc:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
            except BrainfuckError as exc:
                # The tape keeps whatever the program did before failing.
                error = str(exc)
            return EvalResponse(
                session_id=record.session_id,
                output=session.last_output,
                error=error,
                pointer=session.tape.pointer,
                tape=_tape_cells(session.tape, session.config.mem_size),
                evaluations=session.evaluations,
            )

    @app.post("/api/session/{session_id}/reset", response_model=SessionPayload)
    def reset_session(session_id: str) -> SessionPayload:
        try:
            record = session_store.reset(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return _build_payload(record)

    @app.delete("/api/session/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_session(session_id: str) -> Response:
        removed = session_store.remove(session_id)
        if not removed:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown session id: {session_id}",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


__all__ = ["create_app"]
