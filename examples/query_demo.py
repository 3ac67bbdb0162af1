"""Minimal demonstration of a single query."""

from assistant_core import MessageHistory, query
from assistant_core.config.settings import load_assistant_config
from assistant_core.prompts import load_system_prompt

if __name__ == "__main__":
    history = MessageHistory(system_prompt=load_system_prompt("general"))
    question = "Summarize the plot of Moby Dick in three sentences."
    history.add_user_message(question)
    reply = query(history, load_assistant_config())
    print("User:", question)
    print("Assistant:", reply)
