#!/usr/bin/env python
# Walks through the inventory flow against a running docstore:
#   python -m docstore.main   (in another shell)
import time
from rich import print

from batterybuddy.auth import AuthSession
from batterybuddy.categories import CategoryList
from batterybuddy.client import StoreClient
from batterybuddy.logging_setup import setup_logging
from batterybuddy.models import BatteryItem
from batterybuddy.state import InventoryState, InsufficientStockError

def main():
    setup_logging()
    c = StoreClient()

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting store...")
    c.reset()

    # -----------------------------
    # Anonymous session
    # -----------------------------
    auth = AuthSession(c)
    user = auth.initialize()
    if user is None:
        print("[red]Sign-in failed, is the store running?[/red]")
        return
    print(f"Signed in as [cyan]{user.uid}[/cyan]")

    # -----------------------------
    # Categories (fresh store -> defaults)
    # -----------------------------
    categories = CategoryList(c)
    print("\nBattery types:", categories.load())

    # -----------------------------
    # Live mirror
    # -----------------------------
    inventory = InventoryState(c, auth.uid)
    inventory.start()

    print("\nAdding batteries...")
    aa = inventory.add_item(BatteryItem(brand="Duracell", model="Plus", type="AA", location="Drawer 1", quantity=24))
    inventory.add_item(BatteryItem(brand="Energizer", model="Lithium", type="CR2032", location="Drawer 2", quantity=3))
    inventory.add_item(BatteryItem(brand="Panasonic", model="Eneloop", type="AAA", location="Charger", quantity=8))
    time.sleep(0.5)

    print("\nStock out 20 x Duracell Plus...")
    inventory.adjust_quantity(aa, -20)
    time.sleep(0.5)
    try:
        inventory.adjust_quantity(aa, -10)
    except InsufficientStockError as exc:
        print(f"[yellow]{exc}[/yellow]")

    # -----------------------------
    # Filtered view & stats
    # -----------------------------
    print("\nInventory (low stock first):")
    for item in inventory.items:
        flag = "[red]LOW[/red]" if item.is_low_stock else "   "
        print(f"  {flag} {item.brand:<10} {item.model:<8} {item.type:<7} x{item.quantity}")

    inventory.toggle_low_stock_filter()
    print("\nLow stock only:", [i.label for i in inventory.items])

    print("\nStats:", inventory.stats())
    print("\nRecent activity:")
    for entry in inventory.activities:
        print(f"  {entry.action:<10} {entry.description}")

    inventory.stop()
    auth.sign_out()

if __name__ == "__main__":
    main()
