from wgquick.wg_quick import run

if __name__ == "__main__":
    run()
