import logging

from baghmate.config import CONFIG
from baghmate.core.board import Side
from baghmate.core.moves import parse_move
from baghmate.main import Engine


def main(difficulty="hard"):
    logging.basicConfig(level=CONFIG.log_level, format="%(message)s")
    engine = Engine(difficulty=difficulty)

    choice = input("Play as goat or tiger? [goat]: ").strip().lower() or "goat"
    human = Side.TIGER if choice.startswith("t") else Side.GOAT

    while not engine.state.is_game_over():
        print(engine.state)
        print("----------------------------")

        if engine.state.turn is human:
            if not engine.state.legal_moves():
                print(f"{human.value} has no move.")
                break
            text = input("Enter your move (@12, 7-8 or 0x6-12, q to quit): ")
            if text.strip().lower() == "q":
                return None
            try:
                move = parse_move(text)
            except ValueError:
                print("Could not parse move, try again.")
                continue
            if not engine.make_move(move):
                print("Illegal move, try again.")
                continue
        else:
            move = engine.play_engine_move()
            if move is None:
                print(f"{engine.state.turn.value} has no move.")
                break
            print(f"Engine plays: {move}")

    print(engine.state)
    print("Game Over")
    winner = engine.state.winner
    print(f"Result: {winner.value + ' wins' if winner else 'unfinished'}")
    return winner


if __name__ == "__main__":
    main()
