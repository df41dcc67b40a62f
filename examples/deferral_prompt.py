"""
A deferral prompt driven by mdmshell.

This shows how a management policy script uses mdmshell: check that the
machine is enrolled, ask the console user whether to update now or later,
and hand the answer to the agent. The dialog is abandoned so the policy can
finish while the window waits for the user.
"""

import time
from pathlib import Path

from mdmshell import HelperOutcome, MdmShellError, create_client

RESULT_FILE = Path("/tmp/mdmshell_deferral_result")


def main():
    client = create_client()

    if not client.enrolled():
        print("This machine is not enrolled; nothing to do.")
        return

    user = client.console_user()
    if user is None:
        print("Nobody is logged in. Updating right away.")
        client.run_agent("policy", ["-event", "update"], verbose=True)
        return

    print(f"Asking {user} about the update...")
    RESULT_FILE.unlink(missing_ok=True)

    try:
        handle = client.show_dialog(
            "utility",
            {
                "title": "Software Update",
                "heading": "Updates are ready to install",
                "description": "Your Mac will restart when the update completes.",
                "button1": "Update",
                "button2": "Later",
                "default_button": 1,
                "show_delay_options": [0, 3600, 14400],
                "timeout": 600,
                "countdown": True,
            },
            abandon_process=True,
            output_file=RESULT_FILE,
        )
    except MdmShellError as e:
        print(f"Could not show the prompt: {e}")
        return

    print(f"Prompt running as pid {handle.pid}; waiting for an answer.")
    response = handle.read_result()
    while response is None:
        time.sleep(5)
        response = handle.read_result()

    if response.outcome is HelperOutcome.BUTTON_CLICKED and response.button == 1:
        if response.delay_seconds:
            print(f"Deferred for {response.delay_seconds}s.")
        else:
            client.run_agent("policy", ["-event", "update"], verbose=True)
    else:
        print(f"Prompt ended with {response.outcome.value}.")


if __name__ == "__main__":
    main()
