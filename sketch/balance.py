import logging

from sketchbook import run

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run("balance")
