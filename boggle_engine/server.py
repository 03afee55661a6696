import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from boggle_engine.errors import DictionaryNotLoadedError, InvalidBoardError
from boggle_engine.settings import settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("boggle")

# Populated at startup
_solver = None


def _load_solver():
    """Build a solver for the configured dictionary and word policy.

    A missing or unreadable dictionary leaves the solver unloaded; /solve then
    answers 503 until the dictionary is fixed and reloaded.
    """
    from boggle_engine.dictionary import policy_from_settings
    from boggle_engine.solver import Solver

    solver = Solver()
    transform, accept = policy_from_settings(settings)
    logger.info(
        "Loading dictionary from %s (length %d-%d, normalize_qu=%s)",
        settings.DICTIONARY_PATH, settings.MIN_WORD_LENGTH, settings.MAX_WORD_LENGTH, settings.NORMALIZE_QU,
    )
    try:
        solver.load_dictionary(settings.DICTIONARY_PATH, transform, accept)
    except DictionaryNotLoadedError as e:
        logger.error("%s: %s", e, e.__cause__)
    return solver


def create_app() -> FastAPI:
    from contextlib import asynccontextmanager

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        global _solver
        _solver = _load_solver()
        yield

    application = FastAPI(title="Boggle Solver", lifespan=lifespan)

    @application.exception_handler(InvalidBoardError)
    async def invalid_board(request: Request, exc: InvalidBoardError):
        return JSONResponse({"detail": str(exc)}, status_code=400)

    @application.exception_handler(DictionaryNotLoadedError)
    async def dictionary_not_loaded(request: Request, exc: DictionaryNotLoadedError):
        return JSONResponse({"detail": str(exc)}, status_code=503)

    @application.get("/health")
    async def health():
        loaded = _solver is not None and _solver.loaded
        return {
            "status": "ok",
            "dictionary_loaded": loaded,
            "dictionary_words": len(_solver.index) if loaded else 0,
        }

    @application.post("/solve")
    async def solve(request: Request):
        from boggle_engine.board import board_from_string, format_board
        from boggle_engine.metrics import StageTimer
        from boggle_engine.solver import rank_words

        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        board_text = body.get("board") if isinstance(body, dict) else None
        if not isinstance(board_text, str):
            raise HTTPException(400, 'Expected a JSON body like {"board": "catdlinemaropets"}')

        timer = StageTimer()

        with timer.stage("parse"):
            board = board_from_string(board_text)

        if _solver is None:
            raise DictionaryNotLoadedError()

        rows = format_board(board)
        logger.info("Board %dx%d: %s", len(rows), len(rows), " / ".join(rows))

        with timer.stage("solve"):
            solution = _solver.solve(board)

        with timer.stage("collect"):
            all_words = rank_words(_solver.last_word_list())

        words = all_words[:settings.MAX_RESULTS] if settings.MAX_RESULTS > 0 else all_words
        logger.info("Found %d words (returning top %d)", solution.word_count, len(words))

        if settings.DEBUG:
            _save_debug_result(rows, all_words, timer)

        return JSONResponse({
            "grid_size": len(rows),
            "board": rows,
            "words": words,
            "word_count": solution.word_count,
            "score": solution.score,
            "processing_time": timer.total_ms,
            "stage_timings": timer.summary(),
        })

    @application.get("/boards/random")
    async def new_random_board(side: int | None = None):
        from boggle_engine.board import board_to_string, format_board, random_board

        side = side if side is not None else settings.BOARD_SIZE
        if side > settings.MAX_BOARD_SIZE:
            raise InvalidBoardError(f"Board side must be at most {settings.MAX_BOARD_SIZE}, got {side}")
        board = random_board(side)
        return {"board": board_to_string(board), "rows": format_board(board)}

    @application.get("/boards/dice")
    async def new_dice_board():
        from boggle_engine.board import board_to_string, dice_board, format_board

        board = dice_board()
        return {"board": board_to_string(board), "rows": format_board(board)}

    @application.get("/api/settings")
    async def api_get_settings():
        from boggle_engine.settings import EDITABLE_FIELDS, get_editable_settings
        values = get_editable_settings(settings)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        global _solver
        from boggle_engine.settings import DICTIONARY_FIELDS, get_editable_settings, update_settings

        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Expected a JSON object of setting values")

        before = {name: getattr(settings, name) for name in DICTIONARY_FIELDS}
        errors = update_settings(settings, **body)
        if any(getattr(settings, name) != value for name, value in before.items()):
            _solver = _load_solver()

        if errors:
            return JSONResponse({"updated": get_editable_settings(settings), "errors": errors}, status_code=400)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(settings)})

    return application


def _save_debug_result(rows, words, timer):
    import json
    from datetime import datetime

    debug_dir = settings.BASE_DIR / "debug"
    debug_dir.mkdir(exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

    result = {
        "timestamp": ts,
        "board": rows,
        "word_count": len(words),
        "words": words,
        "timings": timer.summary(),
        "total_ms": timer.total_ms,
    }
    with open(debug_dir / f"{ts}_result.json", "w") as f:
        json.dump(result, f, indent=2)

    logger.info("Saved debug result to debug/%s_result.json", ts)


app = create_app()


def main():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
