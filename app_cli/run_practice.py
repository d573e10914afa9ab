from __future__ import annotations
import logging, time
from assess_core.session import PracticeSession
from assess_core.question_bank import load_bank
from assess_core.config import load_config, PRACTICE_COUNT
def ask(prompt: str) -> str:
    return input(prompt + " ").strip()
def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    cfg = load_config()
    print("Reading Practice")
    grade = cfg.get("PRACTICE_GRADE") or ask("Grade (1-8):") or "4"
    count = int(cfg.get("PRACTICE_COUNT", PRACTICE_COUNT))
    session = PracticeSession(grade, load_bank())
    for _ in range(count):
        q = session.next_question()
        if q is None: break
        limit = session.time_limit(q)
        print(f"\n{session.instruction(q.prompt)} ({limit}s): {q.expected_text}")
        t0 = time.perf_counter(); said = ask(">"); rt_ms = (time.perf_counter() - t0) * 1000.0
        if rt_ms > limit * 1000.0: print("Time's up! Let's still see how you did.")
        out = session.submit_voice(q, said, response_time_ms=rt_ms)
        a = out.alignment
        print(f"Accuracy {a.accuracy_percent}%  Fluency {a.fluency_percent}%  {out.feedback}")
        if out.difficulty_message: print(out.difficulty_message)
    s = session.summary()
    print(f"\nDone. {s['correct']}/{s['items_answered']} correct, score {s['raw_score']} (adjusted {s['adjusted_score']}).")
if __name__ == "__main__": main()
