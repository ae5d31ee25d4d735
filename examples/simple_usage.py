#!/usr/bin/env python3
"""
Simple example of using the Story Protocol SDK.
"""
import logging
import os

from story_protocol_sdk import StoryClient, StoryProtocolError


def main():
    """
    Demonstrate basic usage of the StoryClient.

    This example shows how to:
    1. Initialize the client for the iliad testnet
    2. Register an NFT as an IP asset
    3. Attach the non-commercial social remixing license to it
    """
    logging.basicConfig(level=logging.INFO)

    # Read configuration from environment
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    NFT_CONTRACT = os.environ.get("NFT_CONTRACT")
    TOKEN_ID = int(os.environ.get("TOKEN_ID", "1"))

    # Verify configuration
    if not PRIVATE_KEY:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return
    if not NFT_CONTRACT:
        print("ERROR: NFT_CONTRACT environment variable is required")
        return

    client = StoryClient(network="iliad", priv_key=PRIVATE_KEY)
    client.assert_chain_id()
    print(f"Wallet address: {client.address}")

    try:
        registered = client.ip_asset.register({
            "nftContract": NFT_CONTRACT,
            "tokenId": TOKEN_ID,
            "txOptions": {"waitForTransaction": True},
        })
        print(f"IP asset: {registered.ip_id} (tx: {registered.tx_hash})")

        terms = client.license.register_non_com_social_remixing_pil(
            {"txOptions": {"waitForTransaction": True}}
        )
        print(f"License terms id: {terms.license_terms_id}")

        attached = client.license.attach_license_terms({
            "ipId": registered.ip_id,
            "licenseTermsId": terms.license_terms_id,
            "txOptions": {"waitForTransaction": True},
        })
        print(f"Attached: {attached.success}")

    except StoryProtocolError as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    main()
