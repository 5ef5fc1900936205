"""Smoke-test every MCP tool against a locally running server.

Start the server first (`mpn-mcp`, port from HTTP_PORT, default 8080), then:

Usage: .venv/bin/python scripts/test_local_tools.py [base_url]
"""

import asyncio
import json
import sys
import traceback

from mcp.client.streamable_http import streamablehttp_client
from mcp import ClientSession

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080/mcp"
PASS = 0
FAIL = 0


def has_key(key):
    return lambda r: f"missing '{key}'" if key not in r else None

def key_eq(key, val):
    return lambda r: f"{key}={r.get(key)!r} != {val!r}" if r.get(key) != val else None

def no_error():
    return lambda r: f"error: {r.get('error')}" if "error" in r else None

def result_providers(*expected):
    def check(r):
        got = tuple(item.get("provider") for item in r.get("results", []))
        return f"providers {got} != {expected}" if got != expected else None
    return check


async def call_tool(session: ClientSession, tool_name: str, arguments: dict) -> dict:
    """Call an MCP tool and return parsed result."""
    result = await session.call_tool(tool_name, arguments)
    for item in result.content:
        if item.type == "text":
            try:
                return json.loads(item.text)
            except json.JSONDecodeError:
                return {"_raw_text": item.text}
    return {"_empty": True}


async def test_tool(session: ClientSession, name: str, tool: str, args: dict, checks: list):
    """Run a single tool test with validation checks."""
    global PASS, FAIL
    try:
        result = await call_tool(session, tool, args)

        errors = []
        for check_fn in checks:
            err = check_fn(result)
            if err:
                errors.append(err)

        if errors:
            print(f"  FAIL {name}: {'; '.join(errors)}")
            FAIL += 1
        else:
            print(f"  PASS {name}")
            PASS += 1
        return result

    except Exception as e:
        print(f"  FAIL {name}: Exception: {e}")
        traceback.print_exc()
        FAIL += 1
        return {}


async def main():
    global PASS, FAIL

    print("=" * 60)
    print(f"TESTING ALL MCP TOOLS AGAINST {BASE_URL}")
    print("=" * 60)

    async with streamablehttp_client(BASE_URL) as (read_stream, write_stream, _):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()

            tools_result = await session.list_tools()
            tool_names = [t.name for t in tools_result.tools]
            print(f"\nAvailable tools ({len(tool_names)}): {', '.join(tool_names)}")

            # ============================================================
            # 1. classify_part
            # ============================================================
            print("\n--- classify_part ---")

            await test_tool(session, "TI op-amp with package", "classify_part", {
                "mpn": "LM358DR",
            }, [no_error(), key_eq("provider", "ti"), key_eq("package_code", "SOIC")])

            await test_tool(session, "connector with generic category", "classify_part", {
                "mpn": "504182-0210",
                "category": "CONNECTOR",
            }, [no_error(), key_eq("category", "CONNECTOR"), key_eq("series", "504182")])

            await test_tool(session, "Sitronix beats generic ST rule", "classify_part", {
                "mpn": "ST7735S",
            }, [no_error(), key_eq("provider", "sitronix")])

            await test_tool(session, "STM32 attributes", "classify_part", {
                "mpn": "STM32F103C8T6",
            }, [no_error(), key_eq("category", "MICROCONTROLLER_ST"), has_key("attributes")])

            await test_tool(session, "unknown MPN", "classify_part", {
                "mpn": "NOT-A-PART",
            }, [no_error(), key_eq("matched", False)])

            await test_tool(session, "invalid category", "classify_part", {
                "mpn": "LM358N",
                "category": "FakeCategory999",
            }, [has_key("error")])

            # ============================================================
            # 2. classify_parts
            # ============================================================
            print("\n--- classify_parts ---")

            await test_tool(session, "batch list", "classify_parts", {
                "mpns": ["LM358N", "GD25Q128CSIG", "1N4007"],
            }, [no_error(), key_eq("matched", 3), result_providers("ti", "gigadevice", "vishay")])

            await test_tool(session, "JSON string mpns param", "classify_parts", {
                "mpns": '["BSS138BK", "L7805CV"]',
            }, [no_error(), result_providers("nxp", "st")])

            await test_tool(session, "too many MPNs", "classify_parts", {
                "mpns": ["LM358N"] * 51,
            }, [has_key("error")])

            # ============================================================
            # 3. check_replacement
            # ============================================================
            print("\n--- check_replacement ---")

            await test_tool(session, "higher voltage rectifier", "check_replacement", {
                "candidate": "1N4007",
                "original": "1N4001",
            }, [no_error(), key_eq("compatible", True), key_eq("provider", "vishay")])

            await test_tool(session, "lower voltage rectifier", "check_replacement", {
                "candidate": "1N4001",
                "original": "1N4007",
            }, [no_error(), key_eq("compatible", False)])

            await test_tool(session, "op-amp package variant", "check_replacement", {
                "candidate": "LM358D",
                "original": "LM358N",
                "manufacturer": "Texas Instruments",
            }, [no_error(), key_eq("compatible", True)])

            await test_tool(session, "flash vs MCU", "check_replacement", {
                "candidate": "GD25Q128CSIG",
                "original": "GD32F103C8T6",
            }, [no_error(), key_eq("compatible", False)])

            await test_tool(session, "unknown manufacturer", "check_replacement", {
                "candidate": "LM358D",
                "original": "LM358N",
                "manufacturer": "FakeMfr999",
            }, [has_key("error")])

            # ============================================================
            # 4. compare_parts
            # ============================================================
            print("\n--- compare_parts ---")

            await test_tool(session, "same series, other package", "compare_parts", {
                "first": "LM358N",
                "second": "LM358D",
            }, [no_error(), key_eq("similarity", 0.9), key_eq("same_provider", True)])

            await test_tool(session, "regulators from two manufacturers", "compare_parts", {
                "first": "L7805CV",
                "second": "LM7805CT",
            }, [no_error(), key_eq("similarity", 0.4)])

            await test_tool(session, "missing part", "compare_parts", {
                "first": "LM358N",
                "second": "",
            }, [has_key("error")])

            # ============================================================
            # 5. Listings
            # ============================================================
            print("\n--- list_providers / list_categories ---")

            await test_tool(session, "list providers", "list_providers", {},
                            [no_error(), key_eq("total", 7)])

            await test_tool(session, "list categories", "list_categories", {},
                            [no_error(), has_key("categories")])

    # ============================================================
    # Summary
    # ============================================================
    print("\n" + "=" * 60)
    print(f"RESULTS: {PASS} passed, {FAIL} failed, {PASS + FAIL} total")
    print("=" * 60)

    if FAIL > 0:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
