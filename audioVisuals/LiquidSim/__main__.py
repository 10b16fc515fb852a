from audioVisuals.LiquidSim.runner import main

main()
