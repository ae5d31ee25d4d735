#!/usr/bin/env python3
"""
Example of raising and cancelling a dispute with a bounded confirmation wait.
"""
import os
import threading

from story_protocol_sdk import (
    ConfirmationTimeoutError,
    SimulationError,
    StoryClient,
    WaitCancelledError,
)


def main():
    """
    Demonstrate the dispute lifecycle.

    This example shows how to:
    1. Check the dispute tag is whitelisted
    2. Raise a dispute and wait for its id
    3. Cancel it, giving up on the wait if another thread asks to
    """
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    TARGET_IP_ID = os.environ.get("TARGET_IP_ID")

    if not PRIVATE_KEY or not TARGET_IP_ID:
        print("ERROR: PRIVATE_KEY and TARGET_IP_ID environment variables are required")
        return

    client = StoryClient(network="iliad", priv_key=PRIVATE_KEY, confirmation_timeout=60)

    if not client.dispute.read_is_whitelisted_dispute_tag("PLAGIARISM"):
        print("PLAGIARISM is not a whitelisted dispute tag on this network")
        return

    try:
        raised = client.dispute.raise_dispute({
            "targetIpId": TARGET_IP_ID,
            "linkToDisputeEvidence": "ipfs://evidence",
            "targetTag": "PLAGIARISM",
            "txOptions": {"waitForTransaction": True},
        })
    except SimulationError as e:
        print(f"Dispute rejected by the dispute module: {e.reason}")
        return
    print(f"Dispute {raised.dispute_id} raised (tx: {raised.tx_hash})")

    # Any other thread may set this to abandon the wait
    cancel = threading.Event()
    try:
        cancelled = client.dispute.cancel_dispute({
            "disputeId": raised.dispute_id,
            "txOptions": {"waitForTransaction": True, "timeout": 30, "cancel_event": cancel},
        })
        print(f"Dispute cancelled (tx: {cancelled.tx_hash})")
    except WaitCancelledError as e:
        print(f"Stopped waiting for {e.tx_hash}")
    except ConfirmationTimeoutError as e:
        print(f"Not confirmed yet, check {e.tx_hash} later")


if __name__ == "__main__":
    main()
